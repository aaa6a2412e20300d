from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from services.errors import AuthError, ErrorKind

logger = logging.getLogger(__name__)

# AuthError kind -> (status, error code, client-facing message)
AUTH_ERROR_STATUS = {
    ErrorKind.EMAIL_TAKEN: (400, "EMAIL_TAKEN", "email address has been already taken"),
    ErrorKind.INVALID_CREDENTIALS: (401, "INVALID_CREDENTIALS", "invalid username or password"),
    ErrorKind.INVALID_TOKEN: (401, "INVALID_TOKEN", "invalid token"),
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND", "resource not found"),
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # 400 Bad Request (generic)
    @app.errorhandler(400)
    def bad_request(e):
        message = getattr(e, "description", "Bad request")
        return error_response("BAD_REQUEST", message, 400)

    # 401 Unauthorized (missing/garbled Authorization header)
    @app.errorhandler(401)
    def unauthorized(e):
        message = getattr(e, "description", "Unauthorized")
        return error_response("UNAUTHORIZED", message, 401)

    # 403 Forbidden (authenticated but not an admin)
    @app.errorhandler(403)
    def forbidden(e):
        message = getattr(e, "description", "Forbidden")
        return error_response("FORBIDDEN", message, 403)

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        mapped = AUTH_ERROR_STATUS.get(err.kind)
        if mapped is None:
            # INTERNAL: full chain goes to the log, never to the client
            logger.error("internal error: %s", err.message, exc_info=err)
            return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)
        status, code, message = mapped
        logger.info("%s: %s", code, err.message)
        return error_response(code, message, status)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = (err.name or "Bad Request").upper().replace(" ", "_")
        return error_response(code, err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        # In dev, include exception details to speed up debugging
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
