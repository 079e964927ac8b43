"""Request context middleware: correlation IDs and caller identity."""

import ipaddress
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from structlog.contextvars import bind_contextvars, clear_contextvars

from mapsbridge.models.location import CallerIdentity

# Proxy headers checked, in order, before falling back to the socket peer
CLIENT_IP_HEADERS = (
    "X-Forwarded-For",
    "X-Real-IP",
    "X-Original-Forwarded-For",
    "CF-Connecting-IP",
    "X-Cluster-Client-IP",
)
CHAT_ID_HEADER = "X-Chat-Id"
EMAIL_HEADER = "X-User-Email"


def _valid_ip(value: str | None) -> bool:
    if not value or value.lower() == "unknown":
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def client_ip(request: Request) -> str | None:
    """Best guess at the originating client address.

    Args:
        request: The incoming request

    Returns:
        The first valid address from proxy headers, else the peer host
    """
    for header in CLIENT_IP_HEADERS:
        value = request.headers.get(header)
        if value:
            candidate = value.split(",")[0].strip()
            if _valid_ip(candidate):
                return candidate
    return request.client.host if request.client else None


def caller_identity(request: Request) -> CallerIdentity:
    return CallerIdentity(
        ip=client_ip(request),
        email=request.headers.get(EMAIL_HEADER) or None,
        chat_id=request.headers.get(CHAT_ID_HEADER) or None,
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware to attach per-request context.

    Assigns a correlation ID to each request and adds it to:
    - Request state
    - Response headers
    - Structured logging context

    Resolves the caller identity once and stores it on ``request.state.caller``
    for handlers to pass along explicitly.
    """

    def _validate_correlation_id(self, value: str | None) -> bool:
        """
        Validate if a string is a valid correlation ID.

        Args:
        ----
            value: The string to validate

        Returns:
        -------
            True if valid correlation ID, False otherwise
        """
        if not value:
            return False

        try:
            uuid.UUID(value)
            return True
        except (ValueError, AttributeError, TypeError):
            return False

    def _get_correlation_id(self, request: Request) -> str:
        header_value = request.headers.get("X-Request-ID", "")
        if header_value and self._validate_correlation_id(header_value):
            return str(header_value)
        return str(uuid.uuid4())

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers
        """
        clear_contextvars()

        correlation_id = self._get_correlation_id(request)
        bind_contextvars(correlation_id=correlation_id)

        request.state.correlation_id = correlation_id
        request.state.caller = caller_identity(request)

        response = await call_next(request)
        response.headers["X-Request-ID"] = correlation_id
        return response
