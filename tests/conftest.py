import logging
from datetime import datetime, timedelta, timezone

import pytest

from recall.fsrs import RetrievabilityScheduler
from recall.history import ItemStore, ReviewSelector, Reviewer, SessionTracker, create_history_engine
from recall.history.feedback import FeedbackApplicator

START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Store clock that only moves when a test advances it."""

    def __init__(self, start=START):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'history.db'}"


@pytest.fixture
def engine(db_url):
    engine = create_history_engine(db_url)
    yield engine
    engine.dispose()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store(engine, clock):
    return ItemStore(engine, clock=clock)


@pytest.fixture
def model():
    return RetrievabilityScheduler()


@pytest.fixture
def tracker(store):
    return SessionTracker(store)


@pytest.fixture
def selector(store, tracker):
    return ReviewSelector(store, tracker)


@pytest.fixture
def applicator(store, model):
    return FeedbackApplicator(store, model)


@pytest.fixture
def reviewer(store, model):
    return Reviewer(store, model)


@pytest.fixture
def cli_env(tmp_path, monkeypatch, db_url):
    """Point the command line at a throwaway database and log dir."""
    monkeypatch.setenv("RECALL_DATABASE_URL", db_url)
    monkeypatch.setenv("RECALL_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.delenv("TEST_MODE", raising=False)

    # main() reconfigures the root logger; put pytest's handlers back afterwards
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield tmp_path
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class FakeCollection:
    """The subset of a pymongo collection MongoLexicon uses."""

    full_name = "recall.lexicon"

    def __init__(self, docs=()):
        self.docs = {doc["word"]: dict(doc) for doc in docs}

    def find_one(self, query):
        doc = self.docs.get(query["word"])
        return dict(doc) if doc is not None else None

    def update_one(self, query, update, upsert=False):
        if query["word"] not in self.docs and not upsert:
            return
        self.docs.setdefault(query["word"], {}).update(update["$set"])


@pytest.fixture
def fake_collection():
    return FakeCollection
