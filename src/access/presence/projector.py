"""Records boundary crossings and answers "who is on site right now".

Crossings for the same person are serialized; different people never wait on
each other. The access log is the only state: the presence set of a company
can always be rebuilt by replaying it.
"""

from uuid import uuid4

from protean.exceptions import ValidationError

from access.domain import logger
from access.person.events import AccessAction, AccessEvent
from access.projections.presence import PresenceProjection, PresenceRecord
from shared.clock import MonotonicClock
from shared.errors import InvalidPerson, StoreUnavailable
from shared.event_store import EventStore, chronological_key
from shared.locks import KeyedLocks


class PresenceProjector:
    def __init__(self, store: EventStore, clock: MonotonicClock | None = None):
        self.store = store
        self.clock = clock or MonotonicClock()
        self._locks = KeyedLocks()
        self._projections: dict[str, PresenceProjection] = {}

    def open(self, scope) -> PresenceProjection:
        projection = self._projections.setdefault(scope, PresenceProjection(scope))
        projection.ensure_loaded(lambda: self._read(scope))
        return projection

    def close(self, scope) -> None:
        self._projections.pop(scope, None)

    def rebuild(self, scope) -> PresenceProjection:
        projection = self._projections.setdefault(scope, PresenceProjection(scope))
        projection.fold(self._read(scope))
        logger.info("Presence projection rebuilt", scope=scope, present=len(projection.entries))
        return projection

    def _view(self, scope) -> PresenceProjection:
        """Projection for reads. A company with no crossings at all is not cached."""
        projection = self._projections.get(scope)
        if projection is None:
            events = self._read(scope)
            projection = PresenceProjection.replay(scope, events)
            if not events:
                return projection
            projection = self._projections.setdefault(scope, projection)
        projection.ensure_loaded(lambda: self._read(scope))
        return projection

    # -------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------
    def register_event(self, company_id, person_id, person_name, action) -> PresenceRecord | None:
        """Record a crossing and return the record it created or removed.

        An entry returns the person's new presence record. An exit returns the
        record it closed, or None when the person was not on site. The crossing
        is stamped while the person's lock is held.
        """
        _require_ids(company_id, person_id)
        return self._record(
            company_id,
            person_id,
            lambda at: AccessEvent(
                event_id=str(uuid4()),
                company_id=company_id,
                person_id=person_id,
                person_name=person_name,
                action=action,
                timestamp=at,
            ),
        )

    def apply(self, event: AccessEvent) -> PresenceRecord | None:
        _require_ids(event.company_id, event.person_id)
        return self._record(event.company_id, event.person_id, lambda _at: event)

    def _record(self, scope, person_id, build) -> PresenceRecord | None:
        projection = self.open(scope)

        with self._locks.hold((scope, str(person_id))):
            try:
                event = build(self.clock.now(scope))
            except ValidationError:
                if projection.empty and self._projections.get(scope) is projection:
                    self._projections.pop(scope, None)
                raise
            before = projection.record(event.person_id)
            self._append(event)
            projection.absorb(event, lambda: self._read(scope))
            after = projection.record(event.person_id)

        logger.info(
            "Access registered",
            company_id=scope,
            person_id=str(event.person_id),
            action=event.action,
            event_id=str(event.event_id),
        )
        if event.action == AccessAction.ENTRY.value:
            return after
        return before if after is None else None

    # -------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------
    def currently_present(self, scope) -> list[PresenceRecord]:
        """People on site, longest present first."""
        return self._view(scope).records()

    def is_present(self, scope, person_id) -> bool:
        return self._view(scope).record(person_id) is not None

    def history(self, scope) -> list[AccessEvent]:
        return sorted(self._read(scope), key=chronological_key, reverse=True)

    # -------------------------------------------------------------------
    # Store access
    # -------------------------------------------------------------------
    def _append(self, event):
        try:
            return self.store.append(event)
        except OSError as exc:
            logger.error("Event store append failed", scope=event.company_id, event_id=str(event.event_id), error=str(exc))
            raise StoreUnavailable("append", event.company_id, str(exc)) from exc

    def _read(self, scope):
        try:
            return self.store.list_by_scope(scope)
        except OSError as exc:
            logger.error("Event store read failed", scope=scope, error=str(exc))
            raise StoreUnavailable("read", scope, str(exc)) from exc


def _require_ids(company_id, person_id):
    if not company_id:
        raise InvalidPerson("company_id")
    if not person_id:
        raise InvalidPerson("person_id")
