"""Tests for dataplatform.app: App lifecycle, registration, and ASGI entry."""

import json
import threading
from typing import Any

import pytest

from dataplatform.app import App
from dataplatform.config import AppConfig, AppSettings, ServerConfig
from dataplatform.errors import ConfigurationError
from dataplatform.routing.dispatch import DispatchResult
from dataplatform.routing.resolve import Unresolved
from dataplatform.testing import TestClient


class GreetingController:
    def hello(self, name: str) -> dict[str, str]:
        return {"hello": name}


class TestAppRegistration:
    def test_add_route_by_reference(self) -> None:
        app = App()
        app.get("/hello/{name}", "GreetingController@hello")
        assert len(app._pending_routes) == 1
        assert app._pending_routes[0].method == "GET"

    def test_route_decorator_methods(self) -> None:
        app = App()

        @app.route("/items", methods=["get", "POST"])
        def items():
            return []

        assert [p.method for p in app._pending_routes] == ["GET", "POST"]

    def test_route_decorator_defaults_to_get(self) -> None:
        app = App()

        @app.route("/")
        def index():
            return "hi"

        assert app._pending_routes[0].method == "GET"

    def test_verb_decorators(self) -> None:
        app = App()

        @app.put("/items/{id}")
        def update(item_id):
            return item_id

        @app.delete("/items/{id}")
        def remove(item_id):
            return None

        assert [p.method for p in app._pending_routes] == ["PUT", "DELETE"]
        assert update("x") == "x"

    def test_verb_with_handler_returns_handler(self) -> None:
        app = App()

        def ingest():
            return {}

        assert app.post("/ingest", ingest) is ingest

    def test_malformed_reference_rejected(self) -> None:
        app = App()
        with pytest.raises(ConfigurationError):
            app.get("/", "HomeController")

    def test_flask_style_path_rejected(self) -> None:
        app = App()
        with pytest.raises(ConfigurationError):
            app.get("/jobs/<id>", lambda job_id: job_id)

    def test_hooks_registered(self) -> None:
        app = App()

        @app.on_startup
        def start():
            pass

        @app.on_shutdown
        async def stop():
            pass

        assert app._startup_hooks == [start]
        assert app._shutdown_hooks == [stop]


class TestFreeze:
    def test_cannot_register_after_freeze(self) -> None:
        app = App()
        app.get("/", lambda: "ok")
        app.dispatch("GET", "/")
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.get("/late", lambda: "late")

    def test_cannot_add_controller_after_freeze(self) -> None:
        app = App()
        _ = app.router
        with pytest.raises(RuntimeError):
            app.controller("GreetingController", GreetingController())

    def test_router_keeps_order(self) -> None:
        app = App()
        app.get("/b", lambda: "b")
        app.get("/a", lambda: "a")
        assert [r.path for r in app.router.routes] == ["/b", "/a"]

    def test_references_resolved_at_freeze(self) -> None:
        app = App()
        controller = GreetingController()
        app.get("/hello/{name}", "GreetingController@hello")
        app.controller("GreetingController", controller)
        handler = app.router.routes[0].handler
        assert handler.__self__ is controller

    def test_unknown_controller_becomes_unresolved(self) -> None:
        app = App()
        app.get("/", "MissingController@index")
        assert isinstance(app.router.routes[0].handler, Unresolved)

    def test_concurrent_freeze_compiles_once(self) -> None:
        app = App()
        app.get("/", lambda: "ok")
        routers: list[Any] = []

        def worker() -> None:
            routers.append(app.router)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(r is routers[0] for r in routers)


class TestAppDispatch:
    def test_dispatch_controller(self) -> None:
        app = App()
        app.controller("GreetingController", GreetingController())
        app.get("/hello/{name}", "GreetingController@hello")
        assert app.dispatch("GET", "/hello/ada") == DispatchResult(200, {"hello": "ada"})

    def test_dispatch_missing_controller(self) -> None:
        app = App()
        app.get("/", "MissingController@index")
        assert app.dispatch("GET", "/") == DispatchResult(500, {"error": "Controller not found"})

    def test_dispatch_missing_method(self) -> None:
        app = App()
        app.controller("GreetingController", GreetingController())
        app.get("/", "GreetingController@nope")
        assert app.dispatch("GET", "/") == DispatchResult(500, {"error": "Method not found"})

    def test_expose_errors_from_config(self) -> None:
        app = App(AppConfig(app=AppSettings(expose_errors=False)))

        @app.get("/boom")
        def boom():
            raise ValueError("secret detail")

        result = app.dispatch("GET", "/boom")
        assert result == DispatchResult(500, {"error": "Internal Server Error"})


class TestASGI:
    async def test_json_envelope(self) -> None:
        app = App()

        @app.get("/jobs/{id}")
        def job(job_id):
            return {"id": job_id}

        async with TestClient(app) as client:
            response = await client.get("/jobs/7?expand=1")
        assert response.status == 200
        assert response.content_type.startswith("application/json")
        assert response.json_body() == {"id": "7"}

    async def test_not_found(self) -> None:
        async with TestClient(App()) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert response.json_body() == {"error": "Route not found"}

    async def test_handler_error(self) -> None:
        app = App()

        @app.get("/boom")
        def boom():
            raise RuntimeError("boom")

        async with TestClient(app) as client:
            response = await client.get("/boom")
        assert response.status == 500
        assert response.json_body() == {"error": "boom"}

    async def test_payload_too_large(self) -> None:
        app = App(AppConfig(server=ServerConfig(max_content_length=4)))
        app.post("/ingest", lambda: {})
        async with TestClient(app) as client:
            response = await client.post("/ingest", body=b"too long")
        assert response.status == 413
        assert response.json_body() == {"error": "Request body exceeds 4 bytes"}

    @pytest.mark.parametrize(
        ("path", "raw_path", "status", "body"),
        [
            ("/jobs/a?b/extra", b"/jobs/a%3Fb/extra", 404, {"error": "Route not found"}),
            ("/jobs/7#x/y", b"/jobs/7%23x/y", 404, {"error": "Route not found"}),
            ("/jobs/a?b", b"/jobs/a%3Fb", 200, {"id": "a?b"}),
        ],
    )
    async def test_decoded_delimiters_stay_in_segment(
        self, path: str, raw_path: bytes, status: int, body: dict[str, str]
    ) -> None:
        app = App()
        app.get("/jobs/{id}", lambda job_id: {"id": job_id})
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        scope = {
            "type": "http",
            "method": "GET",
            "path": path,
            "raw_path": raw_path,
            "query_string": b"",
            "headers": [],
        }
        await app(scope, receive, send)
        assert sent[0]["status"] == status
        assert json.loads(sent[1]["body"]) == body

    async def test_non_http_scope_ignored(self) -> None:
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await App()({"type": "websocket"}, receive, send)
        assert sent == []


class TestLifespan:
    async def _run_lifespan(self, app: App) -> list[dict[str, Any]]:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return incoming.pop(0)

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        return sent

    async def test_hooks_run_in_order(self) -> None:
        app = App()
        calls: list[str] = []

        @app.on_startup
        def sync_start():
            calls.append("sync")

        @app.on_startup
        async def async_start():
            calls.append("async")

        @app.on_shutdown
        def stop():
            calls.append("stop")

        sent = await self._run_lifespan(app)
        assert calls == ["sync", "async", "stop"]
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_startup_failure(self) -> None:
        app = App()

        @app.on_startup
        def fail():
            raise RuntimeError("no database")

        sent = await self._run_lifespan(app)
        assert sent == [{"type": "lifespan.startup.failed", "message": "no database"}]
