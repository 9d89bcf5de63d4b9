"""Tests for dataplatform.cli: argument parsing and ``dataplatform routes``."""

import sys
import types

import pytest

from dataplatform.app import App
from dataplatform.cli import main


@pytest.fixture
def routes_app(monkeypatch: pytest.MonkeyPatch) -> App:
    """Register a fake module exposing an App with a mix of handlers."""

    class JobsController:
        def show(self, job_id):
            return {"id": job_id}

    def index():
        return "home"

    app = App()
    app.controller("JobsController", JobsController())
    app.get("/", index)
    app.get("/jobs/{id}", "JobsController@show")
    app.delete("/jobs/{id}", "JobsController@remove")
    app.get("/legacy", "LegacyController@index")

    mod = types.ModuleType("_routes_test_app")
    mod.app = app  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_routes_test_app", mod)
    return app


class TestMain:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "dataplatform" in capsys.readouterr().out

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy"])
        assert exc_info.value.code == 2


class TestRoutes:
    def test_lists_routes_in_order(
        self, routes_app: App, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["routes", "_routes_test_app:app"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert lines[2].split() == ["GET", "/", "index"]
        assert lines[3].split() == ["GET", "/jobs/{id}", "JobsController.show"]
        assert "JobsController@remove (method not found)" in lines[4]
        assert "LegacyController@index (controller not found)" in lines[5]

    def test_default_app(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes"])
        out = capsys.readouterr().out
        assert "/api/data/jobs/{id}" in out
        assert "DataController.get_job" in out

    def test_empty_app(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        mod = types.ModuleType("_empty_test_app")
        mod.app = App()  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "_empty_test_app", mod)
        main(["routes", "_empty_test_app"])
        assert "No routes registered." in capsys.readouterr().out

    def test_invalid_import_string(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "nonexistent_module_xyz:app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err
