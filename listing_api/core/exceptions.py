import traceback
import uuid
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from listing_api.core.config import settings
from listing_api.core.logging import get_logger

logger = get_logger(__name__)


class ListingError(Exception):
    """Base exception for the listing service."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ListingError):
    """A caller-supplied value has the wrong shape for how it is matched."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationError(ListingError):
    """Authentication related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "AUTHENTICATION_ERROR", details)


class TokenExpiredError(AuthenticationError):
    """Token expired error."""

    def __init__(self, message: str = "Access token has expired"):
        super().__init__(message, {"action": "refresh_token_or_relogin"})
        self.error_code = "TOKEN_EXPIRED"


class TokenInvalidError(AuthenticationError):
    """Token invalid error."""

    def __init__(self, message: str = "Access token is invalid"):
        super().__init__(message)
        self.error_code = "TOKEN_INVALID"


class AuthorizationError(ListingError):
    """The caller may not see the requested rows."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class ResourceNotFoundError(ListingError):
    """No listing is registered under the requested name."""

    def __init__(self, message: str, resource: Optional[str] = None):
        details = {"resource": resource} if resource else None
        super().__init__(message, "RESOURCE_NOT_FOUND", details)


class BackingStoreError(ListingError):
    """A read against the backing store failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "BACKING_STORE_ERROR", details)


STATUS_CODE_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_INVALID": status.HTTP_401_UNAUTHORIZED,
    "AUTHORIZATION_ERROR": status.HTTP_403_FORBIDDEN,
    "RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "BACKING_STORE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "INTERNAL_ERROR",
    details: Optional[Dict[str, Any]] = None,
    error_id: Optional[str] = None,
    request_path: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Create standardized error response."""

    error_id = error_id or str(uuid.uuid4())[:8]

    error_response = {
        "error": {
            "code": error_code,
            "message": message,
            "error_id": error_id,
        }
    }

    if details:
        error_response["error"]["details"] = details

    if request_path:
        error_response["error"]["path"] = request_path

    return JSONResponse(status_code=status_code, content=error_response, headers=headers)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions raised by routes and dependencies."""
    error_id = str(uuid.uuid4())[:8]

    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code="HTTP_ERROR",
        error_id=error_id,
        request_path=str(request.url.path),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    error_id = str(uuid.uuid4())[:8]

    logger.warning(
        "Validation exception occurred",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    formatted_errors = []
    for error in exc.errors():
        formatted_errors.append(
            {
                "field": ".".join(str(x) for x in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Request validation failed",
        error_code="VALIDATION_ERROR",
        details={"validation_errors": formatted_errors},
        error_id=error_id,
        request_path=str(request.url.path),
    )


async def listing_exception_handler(
    request: Request, exc: ListingError
) -> JSONResponse:
    """Handle custom application exceptions."""
    error_id = str(uuid.uuid4())[:8]

    status_code = STATUS_CODE_MAP.get(
        exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Application exception occurred",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return create_error_response(
        status_code=status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        error_id=error_id,
        request_path=str(request.url.path),
        headers=headers,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    if settings.is_development:
        details = {
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc().split("\n"),
        }
        message = str(exc)
    else:
        details = None
        message = "An unexpected error occurred"

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        error_code="INTERNAL_ERROR",
        details=details,
        error_id=error_id,
        request_path=str(request.url.path),
    )


def setup_exception_handlers(app):
    """Setup all exception handlers for the FastAPI app."""

    app.add_exception_handler(ListingError, listing_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # General exception handler (catch-all)
    app.add_exception_handler(Exception, general_exception_handler)
