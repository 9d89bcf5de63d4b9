"""dataplatform application class.

Mutable during setup (controllers, route registration, lifecycle hooks).
Frozen at runtime when app.run(), app.dispatch() or __call__() is first
invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from dataplatform._internal.asgi import Receive, Scope, Send
from dataplatform._internal.types import Handler, HandlerRef, Hook
from dataplatform.config import AppConfig
from dataplatform.routing.dispatch import Dispatcher, DispatchResult
from dataplatform.routing.resolve import check_ref, resolve_handler
from dataplatform.routing.router import Router, parse_path
from dataplatform.server.handler import handle_request

logger = logging.getLogger("dataplatform.app")


@dataclass(slots=True)
class _PendingRoute:
    """A registration kept until the app freezes."""

    method: str
    path: str
    handler: HandlerRef


class App:
    """The dataplatform application.

    Mutable during setup, frozen on first use. Routes are kept in
    registration order and the first match wins::

        app = App(AppConfig.from_env())
        app.controller("HealthController", HealthController())
        app.get("/health", "HealthController@check")

        @app.get("/ping")
        def ping():
            return {"pong": True}

    Thread safety:
        Setup is single-threaded (module import time). The freeze uses a
        Lock + double-check so exactly one thread compiles the route table,
        even when several ASGI workers receive their first request at once.
    """

    __slots__ = (
        "_controllers",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._controllers: dict[str, object] = {}
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._dispatcher: Dispatcher | None = None

    # -- Controllers --

    def controller(self, name: str, instance: object) -> object:
        """Register a controller instance under *name*.

        Routes can then refer to its operations as ``"name@method"``.
        Registering the same name twice replaces the earlier instance.
        """
        self._check_not_frozen()
        self._controllers[name] = instance
        return instance

    # -- Route registration --

    def add_route(self, method: str, path: str, handler: HandlerRef) -> None:
        """Append a route to the table.

        Args:
            method: HTTP method; stored uppercase.
            path: URL path pattern. Use ``{param}`` for path parameters.
            handler: A callable taking the path parameters positionally,
                or a ``"Controller@method"`` reference.

        Raises:
            ConfigurationError: If the pattern or the handler is malformed.
        """
        self._check_not_frozen()
        parse_path(path)
        check_ref(handler)
        self._pending_routes.append(_PendingRoute(method.upper(), path, handler))

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``add_route``.

        One route is added per method, in the order given. Defaults to
        ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, path, func)
            return func

        return decorator

    def get(self, path: str, handler: HandlerRef | None = None) -> Any:
        """Register a GET route; acts as a decorator when *handler* is omitted."""
        return self._register_or_decorate("GET", path, handler)

    def post(self, path: str, handler: HandlerRef | None = None) -> Any:
        """Register a POST route; acts as a decorator when *handler* is omitted."""
        return self._register_or_decorate("POST", path, handler)

    def put(self, path: str, handler: HandlerRef | None = None) -> Any:
        """Register a PUT route; acts as a decorator when *handler* is omitted."""
        return self._register_or_decorate("PUT", path, handler)

    def delete(self, path: str, handler: HandlerRef | None = None) -> Any:
        """Register a DELETE route; acts as a decorator when *handler* is omitted."""
        return self._register_or_decorate("DELETE", path, handler)

    def _register_or_decorate(self, method: str, path: str, handler: HandlerRef | None) -> Any:
        if handler is not None:
            self.add_route(method, path, handler)
            return handler
        return self.route(path, methods=[method])

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Decorator: run *func* when the server starts.

        Sync and async hooks both work. They run in the order registered,
        before the first HTTP request is accepted.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Decorator: run *func* when the server stops.

        Sync and async hooks both work, in the order registered.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def router(self) -> Router:
        """The compiled route table. Freezes the app if needed."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    # -- Dispatch --

    def dispatch(self, method: str, uri: str) -> DispatchResult:
        """Dispatch a request without going through ASGI.

        Freezes the app on first call. Never raises for request-level
        errors; see ``Dispatcher.dispatch``.
        """
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher.dispatch(method, uri)

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it with uvicorn.

        Args:
            host: Override ``config.server.host``.
            port: Override ``config.server.port``.
        """
        self._ensure_frozen()

        from dataplatform.server.serve import run_server

        run_server(
            self,
            host or self.config.server.host,
            port or self.config.server.port,
            log_level=self.config.server.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._dispatcher is not None

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            max_body=self.config.server.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Answer lifespan startup and shutdown messages.

        Freezes the app at startup (before the first HTTP request), then
        runs the hooks for each phase and reports the outcome to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self._run_hooks(self._startup_hooks)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                logger.info(
                    "%s started (env=%s, routes=%d)",
                    self.config.app.name,
                    self.config.app.env,
                    len(self.router),
                )
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    @staticmethod
    async def _run_hooks(hooks: list[Hook]) -> None:
        for hook in hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Resolve handler references and build the router and dispatcher.

        Caller holds _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            handler = resolve_handler(pending.handler, self._controllers)
            router.register(pending.method, pending.path, handler)
        router.compile()

        self._router = router
        self._dispatcher = Dispatcher(router, expose_errors=self.config.app.expose_errors)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register controllers, routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
