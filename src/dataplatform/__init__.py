"""dataplatform: HTTP application shell for the data platform.

A small router that dispatches requests to controllers, an environment
based configuration loader, and an ASGI front end.

Basic usage::

    from dataplatform import App, AppConfig

    app = App(AppConfig.from_env())

    @app.get("/jobs/{id}")
    def job(id):
        return {"id": id}

    app.dispatch("GET", "/jobs/42")  # DispatchResult(status=200, body={"id": "42"})

The full API is assembled by ``dataplatform.main.create_app``.
"""

__version__ = "1.0.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "DispatchResult",
    "Dispatcher",
    "HTTPError",
    "NotFound",
    "PlatformError",
    "Request",
    "Router",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import dataplatform`` fast while providing a clean top-level API.
    """
    if name == "App":
        from dataplatform.app import App

        return App

    if name == "AppConfig":
        from dataplatform.config import AppConfig

        return AppConfig

    if name in ("Dispatcher", "DispatchResult"):
        from dataplatform.routing import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name == "Router":
        from dataplatform.routing.router import Router

        return Router

    if name == "Request":
        from dataplatform.http.request import Request

        return Request

    if name == "get_request":
        from dataplatform.context import get_request

        return get_request

    if name in ("ConfigurationError", "HTTPError", "NotFound", "PlatformError"):
        from dataplatform import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
