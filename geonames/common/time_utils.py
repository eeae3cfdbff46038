"""Clock helpers for delta-file names and log timestamps."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def yesterday_iso(now: datetime | None = None) -> str:
    # Local clock: the service publishes the previous day's deltas.
    current = now or datetime.now()
    return (current - timedelta(days=1)).strftime("%Y-%m-%d")


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")
