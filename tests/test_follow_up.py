import pytest

from booking_core.core.follow_up import FollowUpTracker
from booking_core.errors import AuthorizationError, ValidationError


@pytest.fixture
def tracker(container, clock):
    return FollowUpTracker(container, clock=clock)


def test_states_are_created_lazily(tracker, container):
    state = tracker.get("event-1")
    assert state.status == "PENDIENTE"
    assert container.follow_ups.get("event-1") is None

    tracker.update_status("event-1", "CONTACTADO")
    assert container.follow_ups.get("event-1").status == "CONTACTADO"


def test_invalid_status(tracker, container):
    with pytest.raises(ValidationError):
        tracker.update_status("event-1", "OLVIDADO")
    assert container.follow_ups.get_all() == {}


def test_notes_keep_status(tracker):
    tracker.update_status("event-1", "PERDIDO")
    state = tracker.update_notes("event-1", "  No contesta  ")
    assert state.notes == "No contesta"
    assert state.status == "PERDIDO"


def test_contact_marks_pending_as_contacted(tracker, clock):
    state = tracker.record_contact("event-1", current_status="PENDIENTE", has_return=False)
    assert state.status == "CONTACTADO"
    assert state.last_contact_at == clock.now


def test_saved_state_keeps_clock_timestamp(tracker, container, clock):
    tracker.update_status("event-1", "CONTACTADO")
    assert container.follow_ups.get("event-1").updated_at == clock.now


def test_contact_with_return_keeps_status(tracker):
    state = tracker.record_contact("event-1", current_status="PENDIENTE", has_return=True)
    assert state.status == "PENDIENTE"
    assert state.last_contact_at is not None


def test_contact_on_lost_client_keeps_status(tracker):
    tracker.update_status("event-1", "PERDIDO")
    state = tracker.record_contact("event-1", current_status="PERDIDO", has_return=False)
    assert state.status == "PERDIDO"


def test_staff_cannot_archive(tracker, container, staff):
    with pytest.raises(AuthorizationError):
        tracker.archive("event-1", staff)
    with pytest.raises(AuthorizationError):
        tracker.bulk_archive(["event-1", "event-2"], staff)
    assert container.follow_ups.get_all() == {}


def test_archive_is_independent_of_status(tracker, container, admin):
    tracker.update_status("event-1", "CONTACTADO")

    archived = tracker.archive("event-1", admin)
    assert archived.archived
    assert archived.status == "CONTACTADO"

    restored = tracker.unarchive("event-1", admin)
    assert not restored.archived
    assert container.follow_ups.get("event-1").status == "CONTACTADO"


def test_bulk_archive(tracker, container, admin):
    states = tracker.bulk_archive(["event-1", "event-2", "event-1"], admin)
    assert [s.event_id for s in states] == ["event-1", "event-2"]
    assert all(s.archived for s in container.follow_ups.get_all().values())
