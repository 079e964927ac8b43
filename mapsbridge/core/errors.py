"""Caller-visible resolution errors.

Anything that goes wrong below the resolver (a regex miss, an upstream
timeout, a malformed API payload) is recovered where it happens. Only these
three reach the caller, and all of them describe bad input rather than a
server fault.
"""

from starlette.status import HTTP_400_BAD_REQUEST


class MapsBridgeError(Exception):
    """Base class for errors surfaced by the resolution pipeline."""

    status_code: int = HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(MapsBridgeError):
    """Input is neither a coordinate pair nor a URL."""


class InvalidCoordinateError(MapsBridgeError):
    """Coordinates are malformed or outside the valid range."""


class CoordinateExtractionError(MapsBridgeError):
    """A URL was recognized but no strategy could resolve a location from it."""
