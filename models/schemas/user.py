from marshmallow import Schema, fields, validate


class CredentialsSchema(Schema):
    # Email is kept exactly as sent: uniqueness is case-sensitive
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserPermissionsSchema(Schema):
    is_admin = fields.Boolean(required=True)


class UserOutSchema(Schema):
    id = fields.Integer()
    email = fields.String()
    is_admin = fields.Boolean()
