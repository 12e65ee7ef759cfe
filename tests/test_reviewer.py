from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from recall.errors import InvalidRating, ItemNotFound
from recall.fsrs import Rating


def test_nothing_due_allocates_no_session(store, reviewer):
    assert reviewer.next() is None
    assert reviewer.session_id is None
    assert store.count_sessions() == 0


def test_first_item_opens_a_session(store, reviewer):
    store.ensure_item("hello")
    item = reviewer.next()
    assert item.key == "hello"
    assert reviewer.session_id == item.session_id
    assert store.count_sessions() == 1


def test_full_pass(store, reviewer, clock):
    store.ensure_item("hello")

    item = reviewer.next()
    updated = reviewer.record_feedback(item.key, "easy")

    assert updated.due_at > clock.now
    assert reviewer.next() is None


def test_pass_does_not_repeat_items_rated_again(store, reviewer, clock):
    for word in ["one", "two"]:
        store.ensure_item(word)

    seen = []
    item = reviewer.next()
    while item is not None:
        seen.append(item.key)
        reviewer.record_feedback(item.key, Rating.AGAIN)
        item = reviewer.next()
    assert sorted(seen) == ["one", "two"]

    # Due again, but already shown in this pass
    clock.advance(minutes=11)
    assert reviewer.next() is None

    reviewer.new_pass()
    assert reviewer.next() is not None


def test_new_pass_opens_a_new_session(store, reviewer):
    store.ensure_item("hello")
    first = reviewer.next().session_id
    reviewer.new_pass()
    assert reviewer.next().session_id > first


def test_record_feedback_errors(store, reviewer):
    store.ensure_item("hello")
    with pytest.raises(InvalidRating):
        reviewer.record_feedback("hello", "meh")
    with pytest.raises(ItemNotFound):
        reviewer.record_feedback("nope", "good")


def test_concurrent_calls_never_repeat_an_item(store, reviewer):
    words = [f"w{i}" for i in range(30)]
    for word in words:
        store.ensure_item(word)

    def drain():
        keys = []
        item = reviewer.next()
        while item is not None:
            keys.append(item.key)
            item = reviewer.next()
        return keys

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: drain(), range(4)))

    shown = [key for keys in results for key in keys]
    assert sorted(shown) == sorted(words)


def test_explicit_now_is_honoured(store, reviewer, clock):
    store.ensure_item("later")
    store.update_item("later", clock.now + timedelta(days=1), store.get_item("later").state)

    assert reviewer.next() is None
    assert reviewer.next(now=clock.now + timedelta(days=2)).key == "later"
