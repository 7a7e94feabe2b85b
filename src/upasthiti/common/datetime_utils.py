from __future__ import annotations

import time
from datetime import date, datetime, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds.

    Note: Wrapped so tests can patch/mock easier.
    """
    return int(time.time() * 1000)


def epoch_ms_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def epoch_ms_to_date(value: int) -> date:
    """Calendar day (UTC) an epoch-millisecond timestamp falls on."""
    return epoch_ms_to_datetime(value).date()
