from datetime import timedelta

from recall.fsrs import LearningPhase, StrengthState
from recall.history import START_OF_TABLE


def _run_pass(selector, session_id, limit=1000):
    """Call next_due like the review loop does until the pass is over."""
    shown = []
    cursor = START_OF_TABLE
    for _ in range(limit):
        item = selector.next_due(session_id, cursor)
        if item is None:
            return shown
        shown.append(item.key)
        cursor = item.row_id
    raise AssertionError("pass did not terminate")


def test_no_duplicates_and_exhaustive(store, tracker, selector):
    words = [f"word{i}" for i in range(25)]
    for word in words:
        store.ensure_item(word)

    session_id = tracker.current_session()
    shown = _run_pass(selector, session_id)

    assert len(shown) == len(words)
    assert sorted(shown) == sorted(words)
    assert selector.next_due(session_id, START_OF_TABLE) is None


def test_returned_item_is_marked(store, tracker, selector):
    store.ensure_item("hello")
    session_id = tracker.current_session()

    item = selector.next_due(session_id)

    assert item.key == "hello"
    assert item.session_id == session_id
    assert store.get_item("hello").session_id == session_id


def test_wraps_around_to_the_start(store, tracker, selector):
    first = store.ensure_item("alpha")
    store.ensure_item("beta")
    last = store.ensure_item("gamma")
    session_id = tracker.current_session()

    # Nothing lies after the last row, so the search restarts from the top
    item = selector.next_due(session_id, resume_after_row=last.row_id)
    assert item is not None
    assert first.row_id <= item.row_id <= last.row_id


def test_only_due_items_are_selected(store, tracker, selector, clock):
    store.ensure_item("cat")
    store.ensure_item("dog")
    store.update_item("dog", clock.now + timedelta(days=1), StrengthState(reps=1, phase=LearningPhase.REVIEW))

    session_id = tracker.current_session()

    assert _run_pass(selector, session_id) == ["cat"]
    assert selector.next_due(session_id) is None


def test_overdue_items_are_as_eligible_as_fresh_ones(store, tracker, selector, clock):
    store.ensure_item("old")
    clock.advance(days=30)
    store.ensure_item("new")

    assert sorted(_run_pass(selector, tracker.current_session())) == ["new", "old"]


def test_items_shown_in_an_earlier_pass_come_back(store, tracker, selector):
    store.ensure_item("hello")
    first = tracker.current_session()
    assert _run_pass(selector, first) == ["hello"]

    tracker.close()
    second = tracker.current_session()
    assert _run_pass(selector, second) == ["hello"]


def test_empty_store_returns_none(tracker, selector):
    assert selector.next_due(tracker.current_session()) is None
