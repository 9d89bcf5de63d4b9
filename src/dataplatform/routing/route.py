"""Route, PathSegment and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One ``/``-separated piece of a route pattern.

    Literal:  ``jobs``  (is_param=False)
    Param:    ``{id}``  (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None

    def accepts(self, part: str) -> bool:
        """Whether this segment matches one segment of a request path."""
        if self.is_param:
            return part != ""
        return part == self.value


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``handler`` is a callable once the app has frozen. While the route is
    still pending it may be a ``"Controller@method"`` string, and after
    resolution it may be an ``Unresolved`` marker when that string names
    nothing.
    """

    method: str
    path: str
    handler: Any
    segments: tuple[PathSegment, ...] = ()

    def match(self, parts: list[str]) -> tuple[str, ...] | None:
        """Match pre-split path *parts*; return the captured params or ``None``.

        Parameters are returned positionally, left to right. Names are only
        markers of which positions to capture.
        """
        if len(parts) != len(self.segments):
            return None
        params: list[str] = []
        for segment, part in zip(self.segments, parts, strict=True):
            if not segment.accepts(part):
                return None
            if segment.is_param:
                params.append(part)
        return tuple(params)

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(s.param_name or "" for s in self.segments if s.is_param)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: tuple[str, ...]
