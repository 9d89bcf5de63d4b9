"""dataplatform exception hierarchy.

Shared across Router, App, dispatcher and the ASGI handler so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class PlatformError(Exception):
    """Base for all dataplatform-specific errors."""


class ConfigurationError(PlatformError):
    """Raised when configuration or route registration is invalid.

    Always raised at startup: while reading the environment, while
    registering routes, or while the app freezes.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PlatformError):
    """An error that maps directly to an HTTP status code.

    Raised by the router and the request pipeline. The dispatcher and the
    ASGI handler turn these into ``{"error": detail}`` responses.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request method and path."""

    def __init__(self, detail: str = "Route not found") -> None:
        super().__init__(status=404, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: the request body exceeds ``server.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            status=413,
            detail=f"Request body exceeds {limit} bytes",
        )
