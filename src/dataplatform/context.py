"""Request-scoped context via ContextVar.

Handlers are called with path parameters only. Anything else about the
current request (body, headers, query string) is read from here.

``request_var`` is set by the ASGI handler before dispatch and reset
afterwards. The dispatch runs on a worker thread inside a copy of the
request's context, so the value is visible there too. Outside a request,
``get_request()`` raises ``LookupError``.
"""

from contextvars import ContextVar

from dataplatform.http.request import Request

request_var: ContextVar[Request] = ContextVar("dataplatform_request")
"""The current request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
