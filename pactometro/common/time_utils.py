"""UTC-focused helpers for run metadata."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_timestamp_iso(moment: datetime | None = None) -> str:
    moment = moment or utc_now()
    return moment.isoformat(timespec="milliseconds")
