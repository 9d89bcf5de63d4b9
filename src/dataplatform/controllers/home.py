"""Home controller: basic application information."""

from typing import Any

from dataplatform import __version__
from dataplatform._internal.clock import now_iso
from dataplatform.config import AppConfig


class HomeController:
    __slots__ = ("config",)

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def index(self) -> dict[str, Any]:
        return {
            "message": f"Welcome to {self.config.app.name}",
            "version": __version__,
            "environment": self.config.app.env,
            "timestamp": now_iso(),
            "endpoints": {
                "health": "/health",
                "api": {
                    "data_ingest": "POST /api/data/ingest",
                    "jobs_list": "GET /api/data/jobs",
                    "job_detail": "GET /api/data/jobs/{id}",
                },
            },
        }
