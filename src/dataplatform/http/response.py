"""HTTP response rendered from a dispatch envelope.

Handlers return plain data; the dispatcher wraps it in a
``DispatchResult``; this module turns that into bytes on the wire.
"""

import json
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response. Immutable; ``with_*`` returns a new one."""

    body: bytes = b""
    status: int = 200
    content_type: str = JSON_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json(cls, data: Any, status: int = 200) -> "Response":
        """Serialize *data* to JSON.

        Values the encoder does not know (datetimes, UUIDs) are rendered
        with ``str()``.
        """
        body = json.dumps(data, default=str, ensure_ascii=False).encode("utf-8")
        return cls(body=body, status=status)

    def with_status(self, status: int) -> "Response":
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        return replace(self, headers=(*self.headers, (name, value)))

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def json_body(self) -> Any:
        """Parse the body back into Python data (handy in tests)."""
        return json.loads(self.body)
