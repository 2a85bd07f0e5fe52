"""Time and identifier helpers.

Ledger and mailbox timestamps are integer epoch milliseconds.
"""

import time
import uuid
from typing import Optional

MS_PER_DAY = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Return the current time in epoch milliseconds."""
    return int(time.time() * 1000)


def cutoff_ms(days: int, now: Optional[int] = None) -> int:
    """Return the timestamp `days` days before `now` (defaults to the current time)."""
    if now is None:
        now = now_ms()
    return now - days * MS_PER_DAY


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex
