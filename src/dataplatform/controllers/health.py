"""Health check controller for load balancer monitoring.

``check()`` aggregates a set of named probes. Every probe returns a dict
with at least a ``status`` of ``ok``, ``warning`` or ``critical``; the
service is ``healthy`` only when every probe is ``ok``.
"""

import resource
import shutil
from collections.abc import Callable
from typing import Any

from dataplatform import __version__
from dataplatform._internal.clock import now_iso

Probe = Callable[[], dict[str, Any]]

# (warning_at, critical_above) as used-percent thresholds
DISK_THRESHOLDS = (90.0, 95.0)
MEMORY_THRESHOLDS = (80.0, 90.0)


def _grade(used_percent: float, thresholds: tuple[float, float]) -> str:
    warning_at, critical_above = thresholds
    if used_percent > critical_above:
        return "critical"
    if used_percent >= warning_at:
        return "warning"
    return "ok"


def check_database() -> dict[str, Any]:
    # No database module exists yet
    return {
        "status": "ok",
        "message": "Database connectivity check not implemented yet",
    }


def check_disk_space(path: str = "/") -> dict[str, Any]:
    usage = shutil.disk_usage(path)
    used_percent = (usage.total - usage.free) / usage.total * 100 if usage.total else 0.0
    return {
        "status": _grade(used_percent, DISK_THRESHOLDS),
        "used_percent": round(used_percent, 2),
        "free_bytes": usage.free,
        "total_bytes": usage.total,
    }


def current_rss() -> int | None:
    """Resident set size of this process in bytes, or None where unknown.

    Read from ``/proc/self/statm``, so Linux only.
    """
    try:
        with open("/proc/self/statm") as statm:
            resident_pages = int(statm.read().split()[1])
    except (OSError, IndexError, ValueError):
        return None
    return resident_pages * resource.getpagesize()


def check_memory() -> dict[str, Any]:
    """Compare the process's resident size with its address-space limit.

    ``ru_maxrss`` is reported in kilobytes on Linux. Grading uses the
    current resident size, or the peak where the current size is not
    available. Without a finite ``RLIMIT_AS`` there is nothing to compare
    against and the probe is ok.
    """
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss * 1024
    current = current_rss()
    soft_limit, _ = resource.getrlimit(resource.RLIMIT_AS)
    usage = {"current_usage": current, "peak_usage": peak}
    if soft_limit in (resource.RLIM_INFINITY, 0):
        return {"status": "ok", "used_percent": None, **usage, "limit": None}

    used_percent = (current if current is not None else peak) / soft_limit * 100
    return {
        "status": _grade(used_percent, MEMORY_THRESHOLDS),
        "used_percent": round(used_percent, 2),
        **usage,
        "limit": soft_limit,
    }


class HealthController:
    """Runs every probe on each ``check()`` call.

    Probes are injectable so deployments (and tests) can add or replace
    them without subclassing.
    """

    __slots__ = ("probes",)

    def __init__(self, probes: dict[str, Probe] | None = None) -> None:
        self.probes: dict[str, Probe] = probes if probes is not None else {
            "database": check_database,
            "disk_space": check_disk_space,
            "memory": check_memory,
        }

    def check(self) -> dict[str, Any]:
        checks = {name: probe() for name, probe in self.probes.items()}
        healthy = all(result["status"] == "ok" for result in checks.values())
        return {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": now_iso(),
            "checks": checks,
            "version": __version__,
        }
