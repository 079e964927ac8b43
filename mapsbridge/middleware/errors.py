"""Error handling middleware."""

from fastapi import HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp

from mapsbridge.core.errors import MapsBridgeError
from mapsbridge.core.logging import get_logger

logger = get_logger()

# Map exception types to status codes (None means use exception's status_code)
ErrorMapping = dict[type[Exception], int | None]

ERROR_MESSAGES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
}


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware to handle errors and provide consistent error responses."""

    def __init__(self, app: ASGIApp) -> None:
        """
        Initialize middleware with error mappings.

        Args:
        ----
            app: The ASGI application
        """
        super().__init__(app)
        self.error_mapping: ErrorMapping = {
            RequestValidationError: HTTP_422_UNPROCESSABLE_ENTITY,
            HTTPException: None,  # Use its own status_code
        }

    def _get_error_detail(self, exc: Exception) -> tuple[str, int]:
        """Get error detail and status code from exception.

        Resolution errors carry their own status; anything unexpected is a 500
        whose message is not exposed.
        """
        if isinstance(exc, MapsBridgeError):
            return exc.message, exc.status_code
        if isinstance(exc, HTTPException):
            return str(exc.detail), exc.status_code
        mapped_status = self.error_mapping.get(type(exc))
        status_code = (
            mapped_status
            if mapped_status is not None
            else HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code == HTTP_500_INTERNAL_SERVER_ERROR:
            return "Internal Server Error", status_code
        detail = str(exc.args[0] if exc.args else str(exc))
        return detail, status_code

    def _create_error_response(
        self,
        error_type: str,
        detail: str,
        status_code: int,
        correlation_id: str | None,
    ) -> JSONResponse:
        """Create JSON error response with optional correlation ID."""
        response = JSONResponse(
            status_code=status_code,
            content={
                "error": error_type,
                "message": detail,
                "status_code": status_code,
                "correlation_id": correlation_id if correlation_id else "unknown",
            },
            media_type="application/json",
        )
        if correlation_id:
            response.headers["X-Request-ID"] = correlation_id
        return response

    def _log_error(
        self,
        request: Request,
        error_type: str,
        detail: str,
        status_code: int,
        correlation_id: str | None,
    ) -> None:
        """Log error details; client errors at warning, server errors at error."""
        log = logger.error if status_code >= HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
        log(
            "request_error",
            error_type=error_type,
            error_message=detail,
            status_code=status_code,
            path=request.url.path,
            method=request.method,
            correlation_id=correlation_id,
        )

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            response = await call_next(request)
            # Don't interfere with CORS preflight responses
            if request.method == "OPTIONS":
                return response

            # Only handle error responses
            if response.status_code < 400:
                return response

            detail = ERROR_MESSAGES.get(response.status_code, "Error")
            raise HTTPException(status_code=response.status_code, detail=detail)

        except Exception as exc:
            correlation_id = getattr(request.state, "correlation_id", None)
            error_type = exc.__class__.__name__
            detail, status_code = self._get_error_detail(exc)

            self._log_error(request, error_type, detail, status_code, correlation_id)
            return self._create_error_response(
                error_type, detail, status_code, correlation_id
            )
