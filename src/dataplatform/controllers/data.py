"""Data controller: ingestion and job management.

Placeholder implementation: jobs are not stored or processed anywhere.
``ingest`` validates the request body and hands back a pending job id;
the job endpoints return fixed example data.
"""

import json
import uuid
from datetime import timedelta
from typing import Any

from dataplatform._internal.clock import now_iso
from dataplatform.context import get_request


def new_job_id() -> str:
    return f"job_{uuid.uuid4().hex[:13]}"


def encoded_size(payload: Any) -> int:
    """Length of *payload* as compact JSON, with ``/`` escaped as ``\\/``."""
    return len(json.dumps(payload, separators=(",", ":")).replace("/", "\\/"))


class DataController:
    __slots__ = ()

    def ingest(self) -> dict[str, Any]:
        """Accept a JSON payload for ingestion.

        An empty, missing or malformed body is reported in the payload
        rather than as an HTTP error.
        """
        try:
            payload = get_request().json()
        except (LookupError, ValueError):
            payload = None

        if not payload:
            return {"error": "Invalid JSON input", "status": "failed"}

        return {
            "message": "Data ingestion job created",
            "job_id": new_job_id(),
            "status": "pending",
            "timestamp": now_iso(),
            "data_size": encoded_size(payload),
        }

    def get_jobs(self) -> dict[str, Any]:
        return {
            "jobs": [
                {
                    "id": "job_example1",
                    "status": "completed",
                    "created_at": now_iso(timedelta(hours=-1)),
                    "completed_at": now_iso(timedelta(minutes=-30)),
                    "records_processed": 1000,
                },
                {
                    "id": "job_example2",
                    "status": "running",
                    "created_at": now_iso(timedelta(minutes=-15)),
                    "completed_at": None,
                    "records_processed": 500,
                },
            ],
            "total": 2,
            "timestamp": now_iso(),
        }

    def get_job(self, job_id: str) -> dict[str, Any]:
        if not job_id:
            return {"error": "Job ID is required", "status": "failed"}

        return {
            "job": {
                "id": job_id,
                "status": "completed",
                "source_type": "api",
                "records_processed": 1000,
                "processing_time_ms": 5000,
                "created_at": now_iso(timedelta(hours=-1)),
                "started_at": now_iso(timedelta(minutes=-55)),
                "completed_at": now_iso(timedelta(minutes=-50)),
                "error_message": None,
            },
            "timestamp": now_iso(),
        }
