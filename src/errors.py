"""Application error taxonomy mapped onto HTTP status codes."""


class AppError(Exception):
    """Base error carrying an HTTP status and a stable machine code."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code


class BadRequestError(AppError):
    status_code = 400
    code = "BAD_REQUEST"


class ValidationError(BadRequestError):
    """Bad request with per-field details."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class AIServiceError(AppError):
    """LLM call failed or returned output that could not be used."""

    status_code = 502
    code = "AI_SERVICE_ERROR"


class InternalError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"
