"""The platform's HTTP API, wired together.

``create_app`` is the application factory used by ``dataplatform run``
and by ASGI servers (``uvicorn --factory dataplatform.main:create_app``).
"""

from pathlib import Path

from dataplatform.app import App
from dataplatform.config import AppConfig
from dataplatform.controllers import DataController, HealthController, HomeController


def create_app(config: AppConfig | None = None, *, env_file: str | Path | None = ".env") -> App:
    """Build the application with every controller and route registered.

    Args:
        config: Use this config instead of reading the environment.
        env_file: ``.env`` file consulted when *config* is not given.
            Missing files are ignored.
    """
    config = config or AppConfig.from_env(env_file=env_file)
    app = App(config)

    app.controller("HomeController", HomeController(config))
    app.controller("HealthController", HealthController())
    app.controller("DataController", DataController())

    app.get("/", "HomeController@index")
    app.get("/health", "HealthController@check")

    app.post("/api/data/ingest", "DataController@ingest")
    app.get("/api/data/jobs", "DataController@get_jobs")
    app.get("/api/data/jobs/{id}", "DataController@get_job")

    return app
