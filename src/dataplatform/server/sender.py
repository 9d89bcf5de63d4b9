"""ASGI response sending: a Response becomes a start and a body message."""

from dataplatform._internal.asgi import Send
from dataplatform.http.response import Response

# 1xx, 204 and 304 never carry a message body
_BODYLESS = frozenset({204, 304})


def _body_allowed(status: int) -> bool:
    return status >= 200 and status not in _BODYLESS


def _encode(name: str, value: str) -> tuple[bytes, bytes]:
    return name.lower().encode("latin-1"), value.encode("latin-1")


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as ``http.response.start`` + ``http.response.body``."""
    body = response.body if _body_allowed(response.status) else b""
    headers = [
        _encode("content-type", response.content_type),
        *(_encode(name, value) for name, value in response.headers),
        _encode("content-length", str(len(body))),
    ]
    await send({"type": "http.response.start", "status": response.status, "headers": headers})
    await send({"type": "http.response.body", "body": body})
