"""Dispatcher: turns a (method, URI) pair into a status + body envelope.

The dispatcher never raises for request-level problems. Unmatched routes,
unbound handler references and handler failures all come back as a
``DispatchResult`` with the matching status code.
"""

import logging
from dataclasses import dataclass
from typing import Any

from dataplatform._internal.invoke import Failure, Success, invoke
from dataplatform.errors import NotFound
from dataplatform.routing.resolve import Unresolved
from dataplatform.routing.router import Router

logger = logging.getLogger("dataplatform.dispatch")

ROUTE_NOT_FOUND = "Route not found"
INTERNAL_ERROR = "Internal Server Error"


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """The outcome of dispatching one request."""

    status: int
    body: Any

    @classmethod
    def error(cls, status: int, message: str) -> "DispatchResult":
        return cls(status=status, body={"error": message})

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def strip_query(uri: str) -> str:
    """Return the path component of *uri* (no query string, no fragment)."""
    path, _, _ = uri.partition("?")
    path, _, _ = path.partition("#")
    return path


class Dispatcher:
    """Match requests against a compiled router and invoke the handler.

    Stateless per call: the router is only read, so one dispatcher can be
    shared by every worker thread.

    Args:
        router: Route table whose handlers are callables or ``Unresolved``
            markers (see ``dataplatform.routing.resolve``).
        expose_errors: Put a failing handler's exception message in the
            response body. When False, the body carries a generic
            ``"Internal Server Error"`` and the message only reaches the log.
    """

    __slots__ = ("expose_errors", "router")

    def __init__(self, router: Router, *, expose_errors: bool = True) -> None:
        self.router = router
        self.expose_errors = expose_errors

    def dispatch(self, method: str, uri: str) -> DispatchResult:
        """Dispatch one request and return its envelope."""
        return self.dispatch_path(method, strip_query(uri))

    def dispatch_path(self, method: str, path: str) -> DispatchResult:
        """Dispatch with a path that has already been separated from its query.

        The ASGI front end uses this: servers hand over a percent-decoded
        path, in which ``?`` and ``#`` are ordinary characters.
        """
        try:
            route_match = self.router.match(method, path)
        except NotFound:
            return DispatchResult.error(404, ROUTE_NOT_FOUND)

        handler = route_match.route.handler
        if isinstance(handler, Unresolved):
            return DispatchResult.error(500, handler.reason)

        match invoke(handler, *route_match.params):
            case Success(value):
                return DispatchResult(status=200, body=value)
            case Failure() as failure:
                logger.error(
                    "Handler for %s %s failed: %s",
                    method,
                    route_match.route.path,
                    failure.message,
                    exc_info=failure.error,
                )
                message = failure.message if self.expose_errors else INTERNAL_ERROR
                return DispatchResult.error(500, message)
