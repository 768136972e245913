"""Event store contract consumed by the ledger and the presence projector.

The core never decides how events are persisted. It needs a store that can
append an immutable event and list a scope's events in chronological order.
``InMemoryEventStore`` is the reference implementation used by the default
application wiring and by the tests.
"""

import threading
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


def chronological_key(event) -> tuple:
    """Sort key for replay: timestamp, ties broken by event id."""
    return (event.timestamp, str(event.event_id))


@runtime_checkable
class EventStore(Protocol):
    def append(self, event: Any) -> str:
        """Durably record the event and return its id. This is the commit point.

        Appending an event whose id is already stored records nothing and
        returns that id.
        """
        ...

    def list_by_scope(self, scope: str, since_id: str | None = None) -> list:
        """Return the scope's events ordered by timestamp (ties by event id).

        When ``since_id`` is given, only events appended after that event are
        returned.
        """
        ...


class InMemoryEventStore:
    """Append-only, thread-safe store partitioned by a scope attribute.

    ``scope_field`` names the event attribute holding the scope
    (``owner_scope`` for inventory events, ``company_id`` for access events).
    """

    def __init__(self, scope_field: str = "owner_scope"):
        self.scope_field = scope_field
        self._lock = threading.Lock()
        self._streams: dict[str, list] = {}
        self._ids: set[str] = set()

    def append(self, event) -> str:
        scope = getattr(event, self.scope_field)
        event_id = str(event.event_id)
        with self._lock:
            if event_id in self._ids:
                logger.debug("Event already appended", scope=scope, event_id=event_id)
                return event_id
            self._ids.add(event_id)
            self._streams.setdefault(scope, []).append(event)
        logger.debug("Event appended", scope=scope, event_id=event_id, event_type=type(event).__name__)
        return event_id

    def list_by_scope(self, scope: str, since_id: str | None = None) -> list:
        with self._lock:
            stream = list(self._streams.get(scope, ()))

        if since_id is not None:
            positions = [i for i, event in enumerate(stream) if str(event.event_id) == str(since_id)]
            stream = stream[positions[0] + 1 :] if positions else stream

        return sorted(stream, key=chronological_key)

    def scopes(self) -> list[str]:
        with self._lock:
            return list(self._streams)

    def _data_reset(self) -> None:
        with self._lock:
            self._streams.clear()
            self._ids.clear()
