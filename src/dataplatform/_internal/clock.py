"""UTC timestamps in ISO 8601, second precision."""

from datetime import UTC, datetime, timedelta


def now_iso(offset: timedelta | None = None) -> str:
    """Return the current UTC time (shifted by *offset*) as ISO 8601."""
    moment = datetime.now(UTC)
    if offset is not None:
        moment += offset
    return moment.isoformat(timespec="seconds")
