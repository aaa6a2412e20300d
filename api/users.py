from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.user import UserPermissionsSchema
from models.schemas.auth import AccessClaimsOutSchema
from utils.decorators import jwt_required, admin_required, get_auth_service

bp = Blueprint("users", __name__)

permissions_schema = UserPermissionsSchema()
claims_out_schema = AccessClaimsOutSchema()


@bp.get("/me")
@jwt_required()
def me():
    """
    Get the claims of the presented access token.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify(
        {
            "data": claims_out_schema.dump(g.current_claims)
        }
    ), 200


@bp.put("/users/<int:user_id>/permissions")
@admin_required()
def update_permissions(user_id: int):
    """
    Admin-only: grant or withdraw the admin flag.
    Tokens issued before the change keep the old flag until they expire.
    Body: { "is_admin": true }
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: path
         name: user_id
         type: integer
         required: true
      -  in: body
         name: body
         schema:
           type: object
           properties:
             is_admin: { type: boolean }
    responses:
      204: { description: Updated }
      403: { description: Not an admin }
      404: { description: User not found }
    """
    data = permissions_schema.load(request.get_json(silent=True) or {})
    get_auth_service().update_user_permissions(user_id, data["is_admin"])
    return ("", 204)
