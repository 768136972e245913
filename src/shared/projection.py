"""Per-scope derived tables rebuilt by folding an event log.

A projection is a disposable cache: ``fold`` rebuilds it from nothing, and
``absorb`` applies one freshly appended event incrementally. Both paths go
through the same ``step`` so the incremental table always equals the fold.
An event older than the newest one already applied cannot be appended to the
end of the fold, so it triggers a full refold from the log instead.
"""

import threading
from collections.abc import Callable, Iterable

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from shared.errors import StoreUnavailable
from shared.event_store import chronological_key

logger = structlog.get_logger(__name__)


class ScopeProjection:
    def __init__(self, scope: str):
        self.scope = scope
        self.loaded = False
        self._lock = threading.RLock()
        self._applied: set[str] = set()
        self._events: list = []
        self._high_water: tuple | None = None
        self.reset()

    # -------------------------------------------------------------------
    # Hooks for concrete projections
    # -------------------------------------------------------------------
    def reset(self) -> None:
        raise NotImplementedError

    def step(self, event) -> None:
        """Apply one event to the table, raising a domain error if it does not apply."""
        raise NotImplementedError

    # -------------------------------------------------------------------
    # Folding
    # -------------------------------------------------------------------
    def fold(self, events: Iterable) -> None:
        with self._lock:
            self.reset()
            self._applied = set()
            self._events = []
            self._high_water = None
            for event in sorted(events, key=chronological_key):
                try:
                    self.step(event)
                except (ObjectNotFoundError, ValidationError) as exc:
                    logger.warning(
                        "Skipping event that does not apply in replay order",
                        scope=self.scope,
                        event_id=str(event.event_id),
                        event_type=type(event).__name__,
                        error=str(exc),
                    )
                self._mark(event)
            self.loaded = True

    def ensure_loaded(self, load: Callable[[], list]) -> None:
        with self._lock:
            if not self.loaded:
                self.fold(load())

    def absorb(self, event, load: Callable[[], list]) -> None:
        """Bring the table up to date with an event that is already in the log.

        If the log cannot be read for a refold, the table is refolded from the
        events it already holds plus this one and marked unloaded, so the next
        ``ensure_loaded`` reads the log again. The event itself stays committed.
        """
        with self._lock:
            if self.loaded and str(event.event_id) in self._applied:
                return

            if self.loaded and (self._high_water is None or chronological_key(event) >= self._high_water):
                self.step(event)
                self._mark(event)
                return

            if self.loaded:
                logger.warning(
                    "Out-of-order event, refolding scope",
                    scope=self.scope,
                    event_id=str(event.event_id),
                    timestamp=event.timestamp.isoformat(),
                )
            try:
                self.fold(load())
            except StoreUnavailable as exc:
                logger.error(
                    "Refold failed after commit, projection marked stale",
                    scope=self.scope,
                    event_id=str(event.event_id),
                    error=str(exc),
                )
                known = [e for e in self._events if str(e.event_id) != str(event.event_id)]
                self.fold(known + [event])
                self.loaded = False

    @property
    def empty(self) -> bool:
        """True when no event of the scope has been folded in."""
        with self._lock:
            return not self._applied

    def _mark(self, event) -> None:
        self._applied.add(str(event.event_id))
        self._events.append(event)
        key = chronological_key(event)
        if self._high_water is None or key > self._high_water:
            self._high_water = key
