from typing import Optional


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[dict] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.errors = errors

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(ApiError):
    status_code = 400
    message = "Validation failed"


class Conflict(ApiError):
    status_code = 400
    message = "Resource already exists"


class Unauthenticated(ApiError):
    status_code = 401
    message = "Access denied. No token provided."


class InvalidCredentials(ApiError):
    status_code = 401
    message = "Invalid credentials"


class InvalidToken(ApiError):
    status_code = 403
    message = "Invalid or expired token."


class Forbidden(ApiError):
    status_code = 403
    message = "Access denied. Admin privileges required."


class NotFound(ApiError):
    status_code = 404
    message = "Resource not found"


class InternalError(ApiError):
    status_code = 500
    message = "Server error"
