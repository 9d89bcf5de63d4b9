"""Immutable HTTP request.

Frozen metadata plus the fully-read body. The body is read once by the
ASGI handler before dispatch, so handlers running on worker threads can
access it synchronously.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qs

from dataplatform._internal.asgi import Receive, Scope
from dataplatform.errors import PayloadTooLarge


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Header names are lowercased. ``query_string`` is kept raw; ``query``
    parses it on access.
    """

    method: str
    path: str
    query_string: str = ""
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: bytes = b""
    client: tuple[str, int] | None = None

    @property
    def url(self) -> str:
        """Path plus query string, for display and logging."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def query(self) -> dict[str, list[str]]:
        return parse_qs(self.query_string, keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises ``ValueError`` if the body is not valid JSON or not UTF-8.
        """
        return json.loads(self.body)

    @classmethod
    async def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        max_body: int | None = None,
    ) -> "Request":
        """Create a Request from an ASGI scope, reading the whole body.

        Raises ``PayloadTooLarge`` once more than *max_body* bytes arrive.
        """
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", ())
        }
        chunks: list[bytes] = []
        size = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                break
            chunk = message.get("body", b"")
            size += len(chunk)
            if max_body is not None and size > max_body:
                raise PayloadTooLarge(max_body)
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=MappingProxyType(headers),
            body=b"".join(chunks),
            client=tuple(client) if client else None,
        )
