"""
core/clock.py -- Server-authoritative UTC timestamps.

Every timestamp the service persists (created_at, modified) comes from here,
never from request input. now_iso() is strictly increasing within a process:
two writes in the same microsecond still get distinct, ordered values, so a
restore that follows a create always carries a later `modified`.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

_lock = threading.Lock()
_last: datetime | None = None


def now() -> datetime:
    """Return the current UTC time, bumped by 1us if the clock has not advanced."""
    global _last
    with _lock:
        current = datetime.now(timezone.utc)
        if _last is not None and current <= _last:
            current = _last + timedelta(microseconds=1)
        _last = current
        return current


def now_iso() -> str:
    # Fixed width so stored strings sort in time order.
    return now().isoformat(timespec="microseconds")
