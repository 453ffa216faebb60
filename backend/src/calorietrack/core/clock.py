from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite returns stored timestamps without tzinfo; they were written as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_clock() -> Callable[[], datetime]:
    """Request-scoped "now"; tests override it with a fixed clock."""
    return utc_now
