"""
Authentication blueprint:
- POST /register
- POST /login
- POST /refresh  (Authorization: Bearer <refresh token>)
- POST /revoke   (Authorization: Bearer <refresh token>)

The implementation:
- Uses argon2 for password hashing (via utils.password_hasher)
- Issues short-lived access tokens and long-lived refresh tokens (JWTs signed with HS256)
- Stores refresh token IDs in DB (RefreshToken model) so they can be rotated once and revoked
- All rules live in services.auth.AuthService; AuthError kinds map to statuses in api.errors
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models.user import User
from models.schemas.user import CredentialsSchema, UserOutSchema
from models.schemas.auth import TokenPairOutSchema
from utils.decorators import extract_bearer, get_auth_service


bp = Blueprint("auth", __name__)

credentials_schema = CredentialsSchema()
user_out_schema = UserOutSchema()
token_pair_out_schema = TokenPairOutSchema()


def require_bearer() -> str:
    token = extract_bearer()
    if token is None:
        abort(401, description="missing token")
    return token


@bp.post("/register")
def register():
    """
    register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Email already taken
      422:
        description: Validation error
    """
    data = credentials_schema.load(request.get_json(silent=True) or {})

    user = get_auth_service().register(User(email=data["email"]), data["password"])

    return jsonify(
        {
            "data": user_out_schema.dump(user)
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    data = credentials_schema.load(request.get_json(silent=True) or {})

    tokens = get_auth_service().login(data["email"], data["password"])

    return jsonify(token_pair_out_schema.dump(tokens)), 200


@bp.post("/refresh")
def refresh():
    """
    Use the refresh token to obtain new access and refresh tokens (rotation).
    The presented refresh token stops working.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Missing, invalid or already used refresh token
    """
    tokens = get_auth_service().refresh(require_bearer())
    return jsonify(token_pair_out_schema.dump(tokens)), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token (logout). Revoking twice is not an error.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Missing or invalid refresh token
    """
    get_auth_service().revoke(require_bearer())
    return ("", 204)
