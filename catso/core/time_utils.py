from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], int]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(utc_now().timestamp() * 1000)


__all__ = ["Clock", "now_ms", "utc_now"]
