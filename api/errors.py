from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from services.exceptions import AppError

logger = logging.getLogger(__name__)


def error_response(error: str, message: str, status: int, details: list | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def field_errors(messages, prefix: str = "") -> list:
    """
    Flatten marshmallow's nested {field: [messages]} into [{field, message}, ...],
    one entry per violated constraint.
    """
    if isinstance(messages, (list, tuple)):
        return [{"field": prefix.rstrip(".") or "_schema", "message": str(m)} for m in messages]
    out = []
    for field, value in messages.items():
        name = f"{prefix}{field}"
        if isinstance(value, dict):
            out.extend(field_errors(value, prefix=f"{name}."))
        elif isinstance(value, (list, tuple)):
            out.extend({"field": name, "message": str(m)} for m in value)
        else:
            out.append({"field": name, "message": str(value)})
    return out


def register_error_handlers(app):
    # Domain errors carry their own status and client-safe message
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error("Application error", exc_info=err)
        else:
            logger.info("%s: %s", err.error, err.message)
        return error_response(err.error, err.message, err.status_code, details=err.details)

    # Marshmallow validation errors map to 400 with one entry per failing field constraint
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("VALIDATION_ERROR", "Invalid input", 400, details=field_errors(err.messages))

    # Integrity errors that escaped the services (unique constraints, FK violations)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        logger.warning("Integrity error", exc_info=err)
        lower_msg = str(getattr(err, "orig", err)).lower()
        if "unique" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 400)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # Werkzeug HTTPExceptions (unknown routes, wrong method, malformed JSON) keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = (err.name or "Bad Request").upper().replace(" ", "_")
        return error_response(code, err.description, err.code or 400)

    # 500 Internal Error (catch-all); details never reach the client
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)
