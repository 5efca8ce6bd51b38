"""
Domain errors raised by the services and mapped to HTTP responses in api.errors.

Every error carries the HTTP status, a stable error code and a client-safe message.
"""
from __future__ import annotations

from typing import List, Optional


class AppError(Exception):
    status_code = 500
    error = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[List[dict]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Conflict(AppError):
    status_code = 400
    error = "CONFLICT"
    default_message = "Conflict"


class Unauthorized(AppError):
    status_code = 401
    error = "UNAUTHORIZED"
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    error = "NOT_FOUND"
    default_message = "Resource not found"
