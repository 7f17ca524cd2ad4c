# expense_tracker/errors.py
import logging
import traceback

from flask import current_app
from werkzeug.exceptions import HTTPException

from .responses import failure

logger = logging.getLogger("expense-backend.errors")


class ApiError(Exception):
    """Failure that maps onto a fixed HTTP status and the error envelope"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors


class ValidationFailure(ApiError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors, message=None):
        super().__init__(message, errors=errors)


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "You are not logged in. Please log in to get access."


class Forbidden(ApiError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(exc):
        return failure(exc.message, exc.status_code, errors=exc.errors)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code == 404:
            return failure("Route not found", 404)
        response, status = failure(exc.description or exc.name, exc.code)
        if exc.code == 405 and getattr(exc, "valid_methods", None):
            response.headers["Allow"] = ", ".join(exc.valid_methods)
        return response, status

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        logger.exception("Unhandled error")
        extra = {}
        if not current_app.config.get("IS_PRODUCTION"):
            extra["stack"] = "".join(traceback.format_exception(exc))
        return failure("Internal server error", 500, **extra)
