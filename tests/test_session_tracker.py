import pytest

from recall.errors import ItemNotFound
from recall.history import SessionTracker


def test_no_session_until_requested(store, tracker):
    assert tracker.session_id is None
    assert store.count_sessions() == 0


def test_current_session_is_stable_within_a_pass(store, tracker):
    first = tracker.current_session()
    assert tracker.current_session() == first
    assert tracker.session_id == first
    assert store.count_sessions() == 1


def test_new_pass_gets_a_greater_id(store, tracker):
    first = tracker.current_session()
    tracker.close()
    assert tracker.session_id is None

    second = tracker.current_session()
    assert second > first
    assert store.count_sessions() == 2


def test_ids_increase_across_tracker_instances(store):
    ids = [SessionTracker(store).current_session() for _ in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_mark_shown_stamps_item(store, tracker):
    store.ensure_item("hello")
    session_id = tracker.current_session()

    tracker.mark_shown("hello", session_id)

    assert store.get_item("hello").session_id == session_id


def test_mark_shown_missing_item(tracker):
    session_id = tracker.current_session()
    with pytest.raises(ItemNotFound):
        tracker.mark_shown("nope", session_id)
