"""API error type and exception handlers with request_id in responses."""

from http import HTTPStatus
from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)

INPUT_VALIDATION_FAILED = "Input validation failed"


class ApiError(Exception):
    """Error surfaced to API clients.

    ``is_operational`` separates expected client-facing conditions (bad
    credentials, missing permissions) from programming errors such as a route
    wired without authentication. Non-operational errors are logged at error
    level and their message is hidden from clients in production.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        is_operational: bool = True,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.is_operational = is_operational
        self.details = details

    def __repr__(self) -> str:
        return (
            f"ApiError(status_code={self.status_code}, message={self.message!r}, "
            f"is_operational={self.is_operational})"
        )

    @classmethod
    def bad_request(cls, message: str = "Bad Request", details: Any = None) -> "ApiError":
        return cls(status.HTTP_400_BAD_REQUEST, message, details=details)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized", details: Any = None) -> "ApiError":
        return cls(status.HTTP_401_UNAUTHORIZED, message, details=details)

    @classmethod
    def forbidden(cls, message: str = "Forbidden", details: Any = None) -> "ApiError":
        return cls(status.HTTP_403_FORBIDDEN, message, details=details)

    @classmethod
    def not_found(cls, message: str = "Not Found", details: Any = None) -> "ApiError":
        return cls(status.HTTP_404_NOT_FOUND, message, details=details)

    @classmethod
    def internal(
        cls, message: str = "Internal Server Error", details: Any = None
    ) -> "ApiError":
        return cls(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            message,
            is_operational=False,
            details=details,
        )


def _error_body(status_code: int, message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {
        "code": status_code,
        "message": message,
        "request_id": correlation_id.get(),
    }
    if details is not None:
        body["details"] = details
    return body


def render_api_error(request: Request, exc: ApiError) -> JSONResponse:
    """Log an ApiError and build its JSON response."""
    settings = get_settings()
    status_code, message, details = exc.status_code, exc.message, exc.details

    if exc.is_operational:
        logger.warning(
            "Request failed",
            status_code=status_code,
            error=message,
            method=request.method,
            path=request.url.path,
        )
    else:
        logger.error(
            "Non-operational error",
            status_code=status_code,
            error=message,
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        if settings.is_production:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            message = HTTPStatus.INTERNAL_SERVER_ERROR.phrase
            details = None

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=_error_body(status_code, message, details),
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return render_api_error(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.status_code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return render_api_error(
            request,
            ApiError.bad_request(
                INPUT_VALIDATION_FAILED, details=jsonable_encoder(exc.errors())
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
            ),
        )
