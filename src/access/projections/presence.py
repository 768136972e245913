"""Who is currently on site for one company.

Folds the company's access log in timestamp order into
``person_id -> latest entry``: an entry inserts or overwrites (a person
re-badging without leaving keeps their place, with the clock moved forward),
an exit removes the person if present and is otherwise a no-op.
"""

from protean.fields import DateTime, Identifier, String

from access.domain import access
from access.person.events import AccessAction, AccessEvent
from shared.projection import ScopeProjection


@access.projection
class PresenceRecord:
    person_id = Identifier(identifier=True, required=True)
    person_name = String(max_length=255)
    company_id = Identifier(required=True)
    since = DateTime(required=True)


class PresenceProjection(ScopeProjection):
    def reset(self):
        self.entries: dict[str, AccessEvent] = {}

    @classmethod
    def replay(cls, scope, events):
        projection = cls(scope)
        projection.fold(events)
        return projection

    def step(self, event: AccessEvent) -> None:
        match AccessAction(event.action):
            case AccessAction.ENTRY:
                self.entries[event.person_id] = event
            case AccessAction.EXIT:
                self.entries.pop(event.person_id, None)

    def record(self, person_id) -> PresenceRecord | None:
        with self._lock:
            entry = self.entries.get(str(person_id))
            return _to_record(entry) if entry is not None else None

    def records(self) -> list[PresenceRecord]:
        with self._lock:
            entries = sorted(self.entries.values(), key=lambda entry: entry.timestamp)
            return [_to_record(entry) for entry in entries]


def _to_record(entry) -> PresenceRecord:
    return PresenceRecord(
        person_id=entry.person_id,
        person_name=entry.person_name,
        company_id=entry.company_id,
        since=entry.timestamp,
    )
