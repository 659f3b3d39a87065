from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
import logging


class APIError(Exception):
    """Base for errors a view raises to produce a uniform error envelope."""

    status = 500
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details


class ValidationError(APIError):
    status = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"


class AuthenticationError(APIError):
    status = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class AuthorizationError(APIError):
    status = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(APIError):
    status = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(APIError):
    status = 409
    code = "CONFLICT"
    default_message = "Conflict"


class InternalError(APIError):
    pass


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        if isinstance(err, InternalError):
            logging.error("Internal error: %s", err.__cause__ or err.message)
        return error_response(err.code, err.message, err.status, details=err.details)

    # 404 Not Found (unknown routes)
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Marshmallow validation errors map to 400
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        # err.messages contains field-level details
        if current_app and current_app.debug:
            logging.info("Validation failed: %s", err.messages)
        return error_response("VALIDATION_ERROR", "Invalid input", 400, details=err.messages)

    # Integrity errors (unique constraints, FK violations)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logging.warning("Integrity error: %s", message)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.name.upper().replace(" ", "_"), err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
