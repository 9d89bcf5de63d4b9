"""Ordered router with first-match-wins path matching.

Routes are appended in registration order and scanned linearly. There is
no specificity ranking: the earliest registered route whose method and
pattern both match always wins, and duplicates are legal.
"""

import re
from dataclasses import replace

from dataplatform.errors import ConfigurationError, NotFound
from dataplatform.routing.route import PathSegment, Route, RouteMatch

_FLASK_STYLE = re.compile(r"<[^>]+>")


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    The pattern is split on ``/`` without stripping, so the leading empty
    segment and any trailing slash take part in matching exactly like the
    request path does.

    Examples::

        "/"             -> (PathSegment(""), PathSegment(""))
        "/jobs"         -> (PathSegment(""), PathSegment("jobs"))
        "/jobs/{id}"    -> (PathSegment(""), PathSegment("jobs"),
                            PathSegment("{id}", is_param=True, param_name="id"))

    Raises ``ConfigurationError`` for ``<param>`` style placeholders.
    """
    if _FLASK_STYLE.search(path):
        msg = (
            f"Route path {path!r} uses <param> syntax. "
            "Use {param} placeholders instead, e.g. '/jobs/{id}'."
        )
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    for part in path.split("/"):
        if len(part) > 2 and part.startswith("{") and part.endswith("}"):
            segments.append(PathSegment(value=part, is_param=True, param_name=part[1:-1]))
        else:
            segments.append(PathSegment(value=part))
    return tuple(segments)


def split_path(path: str) -> list[str]:
    """Split a request path the same way ``parse_path`` splits patterns."""
    return path.split("/")


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.get("/jobs", list_jobs)
        router.get("/jobs/{id}", get_job)
        router.compile()
        match = router.match("GET", "/jobs/42")
        match.params  # ("42",)
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._compiled = False

    def register(self, method: str, path: str, handler: object) -> Route:
        """Append a route for *method* and *path*. Must be called before compile()."""
        route = Route(method=method.upper(), path=path, handler=handler)
        return self.add(route)

    def add(self, route: Route) -> Route:
        """Append an already-built route, parsing its pattern if needed."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if not route.segments:
            route = replace(route, segments=parse_path(route.path))
        self._routes.append(route)
        return route

    def get(self, path: str, handler: object) -> Route:
        return self.register("GET", path, handler)

    def post(self, path: str, handler: object) -> Route:
        return self.register("POST", path, handler)

    def put(self, path: str, handler: object) -> Route:
        return self.register("PUT", path, handler)

    def delete(self, path: str, handler: object) -> Route:
        return self.register("DELETE", path, handler)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first route matching *method* and *path*.

        *path* must already be stripped of its query string.
        Raises ``NotFound`` if no route matches. A path registered only for
        other methods is still a 404: there is no 405 fallback.
        """
        parts = split_path(path)
        for route in self._routes:
            if route.method != method:
                continue
            params = route.match(parts)
            if params is not None:
                return RouteMatch(route=route, params=params)
        raise NotFound
