"""Tests for folding access events into the presence set."""

from datetime import UTC, datetime, timedelta

import pytest
from access.person.events import AccessEvent
from access.projections.presence import PresenceProjection
from protean.exceptions import ValidationError

COMPANY = "company-001"
START = datetime(2026, 3, 1, 8, 0, tzinfo=UTC)


def _event(event_id, person_id, action, minutes, name=None):
    return AccessEvent(
        event_id=event_id,
        company_id=COMPANY,
        person_id=person_id,
        person_name=name or person_id.title(),
        action=action,
        timestamp=START + timedelta(minutes=minutes),
    )


def _present(projection):
    return [(str(record.person_id), record.since) for record in projection.records()]


class TestAccessEvent:
    def test_fields(self):
        event = _event("e1", "ana", "entry", 0, name="Ana Gómez")
        assert event.company_id == COMPANY
        assert event.person_id == "ana"
        assert event.person_name == "Ana Gómez"
        assert event.action == "entry"
        assert event.timestamp == START

    def test_unknown_action_is_rejected(self):
        with pytest.raises(ValidationError):
            _event("e1", "ana", "teleport", 0)


class TestFold:
    def test_empty_log(self):
        assert PresenceProjection.replay(COMPANY, []).records() == []

    def test_entry_makes_present(self):
        projection = PresenceProjection.replay(COMPANY, [_event("e1", "ana", "entry", 0)])
        record = projection.record("ana")
        assert record.person_name == "Ana"
        assert record.since == START

    def test_exit_removes(self):
        projection = PresenceProjection.replay(
            COMPANY, [_event("e1", "ana", "entry", 0), _event("e2", "ana", "exit", 5)]
        )
        assert projection.record("ana") is None

    def test_exit_without_entry_is_noop(self):
        projection = PresenceProjection.replay(
            COMPANY, [_event("e1", "ana", "exit", 0), _event("e2", "luis", "entry", 1)]
        )
        assert _present(projection) == [("luis", START + timedelta(minutes=1))]

    def test_second_entry_moves_clock_forward(self):
        projection = PresenceProjection.replay(
            COMPANY, [_event("e1", "ana", "entry", 0), _event("e2", "ana", "entry", 30)]
        )
        assert _present(projection) == [("ana", START + timedelta(minutes=30))]

    def test_records_sorted_by_arrival(self):
        projection = PresenceProjection.replay(
            COMPANY,
            [_event("e1", "luis", "entry", 10), _event("e2", "ana", "entry", 0), _event("e3", "eva", "entry", 5)],
        )
        assert [person for person, _ in _present(projection)] == ["ana", "eva", "luis"]

    def test_fold_is_independent_of_input_order(self):
        events = [
            _event("e1", "ana", "entry", 0),
            _event("e2", "luis", "entry", 1),
            _event("e3", "ana", "exit", 2),
            _event("e4", "ana", "entry", 3),
            _event("e5", "luis", "exit", 4),
        ]
        forward = PresenceProjection.replay(COMPANY, events)
        backward = PresenceProjection.replay(COMPANY, list(reversed(events)))
        assert _present(forward) == _present(backward) == [("ana", START + timedelta(minutes=3))]


class TestAbsorb:
    def test_late_exit_refolds(self):
        log = [_event("e1", "ana", "entry", 0), _event("e3", "ana", "entry", 20)]
        projection = PresenceProjection.replay(COMPANY, log)

        late_exit = _event("e2", "ana", "exit", 10)
        log.append(late_exit)
        projection.absorb(late_exit, lambda: list(log))

        assert _present(projection) == [("ana", START + timedelta(minutes=20))]

    def test_late_entry_before_exit_stays_absent(self):
        log = [_event("e2", "ana", "exit", 10)]
        projection = PresenceProjection.replay(COMPANY, log)

        late_entry = _event("e1", "ana", "entry", 0)
        log.append(late_entry)
        projection.absorb(late_entry, lambda: list(log))

        assert projection.record("ana") is None
