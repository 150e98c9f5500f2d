"""Application exception classes and handlers."""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """No session, or the session no longer resolves to a user."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            message=message, code="AUTHENTICATION_REQUIRED", status_code=401
        )


class InvalidCredentialsError(AppException):
    """Invalid username or password."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid username or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


# --- Validation (400) ---


class ValidationError(AppException):
    """Malformed or inconsistent input, reported back to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=400)


# --- Conflict (409) ---


class ConflictError(AppException):
    """A unique field (username, display name, email) is already taken."""

    def __init__(
        self, message: str = "Username, display name or email already in use."
    ) -> None:
        super().__init__(message=message, code="CONFLICT", status_code=409)


# --- Not Found (404) ---


class UserNotFoundError(AppException):
    """User not found."""

    def __init__(self) -> None:
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
        )


# --- Rate Limit (429) ---


class AccountLockedError(AppException):
    """Too many failed login attempts."""

    def __init__(self) -> None:
        super().__init__(
            message="Too many failed login attempts. Please try again later.",
            code="ACCOUNT_LOCKED",
            status_code=429,
        )


# --- Store (500) ---


class StoreError(AppException):
    """Persistence failure. The message never carries internal detail."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message=message, code="STORE_ERROR", status_code=500)


# --- Exception Handlers ---


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures with a human-readable message."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
        message = f"{field}: {detail}" if field else detail
    return JSONResponse(status_code=422, content=error_body(message))


async def store_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Log unexpected persistence failures and hide their detail."""
    logger.error(
        "Unhandled store error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=error_body("Internal server error"))


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Custom handler for rate limit exceeded errors."""
    return JSONResponse(status_code=429, content=error_body("Rate limit exceeded"))
