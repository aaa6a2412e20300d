from marshmallow import Schema, fields


class TokenPairOutSchema(Schema):
    access_token = fields.String()
    refresh_token = fields.String()
    token_type = fields.Constant("bearer")


class AccessClaimsOutSchema(Schema):
    user_id = fields.Integer()
    is_admin = fields.Boolean()
    token_id = fields.String()
    issuer = fields.String()
    issued_at = fields.DateTime()
    expires_at = fields.DateTime()
