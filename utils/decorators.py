from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app


def extract_bearer() -> str | None:
    """Return the token from 'Authorization: Bearer <token>' (scheme is case-insensitive)."""
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def get_auth_service():
    return current_app.extensions["auth_service"]


def jwt_required():
    """
    Validate the bearer access token and expose its claims as g.current_claims.
    Stateless: the database is not consulted.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_bearer()
            if token is None:
                abort(401, description="missing token")
            # AuthError(INVALID_TOKEN) is turned into a 401 by the error handlers
            g.current_claims = get_auth_service().validate_access_token(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def admin_required():
    """
    Allow access only if the access token carries the admin flag.
    The flag is the snapshot taken when the token was issued.
    """
    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            if not g.current_claims.is_admin:
                abort(403, description="admin permission required")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
