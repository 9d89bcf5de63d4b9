"""ASGI handler: translates ASGI scope/messages to dataplatform types.

The only component that touches raw ASGI for HTTP requests. Reads the
request, runs the synchronous dispatcher on a worker thread with the
request in context, and sends the envelope back as JSON.
"""

import contextvars
import logging
import time
from contextvars import Token

import anyio.to_thread

from dataplatform._internal.asgi import Receive, Scope, Send
from dataplatform.context import request_var
from dataplatform.errors import HTTPError
from dataplatform.http.request import Request
from dataplatform.http.response import Response
from dataplatform.routing.dispatch import INTERNAL_ERROR, Dispatcher
from dataplatform.server.sender import send_response

logger = logging.getLogger("dataplatform.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    max_body: int | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    started = time.perf_counter()
    method = scope.get("method", "-")
    path = scope.get("path", "-")

    try:
        request = await Request.from_asgi(scope, receive, max_body=max_body)
        response = await _dispatch(request, dispatcher)
    except HTTPError as exc:
        response = Response.json({"error": exc.detail}, status=exc.status)
    except Exception:
        logger.exception("Unhandled error while serving %s %s", method, path)
        response = Response.json({"error": INTERNAL_ERROR}, status=500)

    await send_response(response, send)

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %d (%.1fms)", method, path, response.status, elapsed_ms)


async def _dispatch(request: Request, dispatcher: Dispatcher) -> Response:
    """Run the dispatcher off the event loop with *request* in context."""
    token: Token[Request] = request_var.set(request)
    try:
        ctx = contextvars.copy_context()
        result = await anyio.to_thread.run_sync(
            ctx.run, dispatcher.dispatch_path, request.method, request.path
        )
    finally:
        request_var.reset(token)
    return Response.json(result.body, status=result.status)
