"""Per-scope monotonic timestamps for events stamped by the core."""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(UTC)


class MonotonicClock:
    """Hands out strictly increasing timestamps within each scope.

    Two movements recorded in the same microsecond would otherwise be ordered
    by their random event ids during replay, which can place an entry before
    the create it depends on.
    """

    def __init__(self, source: Callable[[], datetime] = utc_now):
        self._source = source
        self._lock = threading.Lock()
        self._last: dict[str, datetime] = {}

    def now(self, scope: str) -> datetime:
        with self._lock:
            stamp = self._source()
            last = self._last.get(scope)
            if last is not None and stamp <= last:
                stamp = last + _TICK
            self._last[scope] = stamp
            return stamp
