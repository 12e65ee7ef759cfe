"""
Lexicon repository - Dictionary lookups for looked-up words

A dictionary is anything with a ``name`` and a ``lookup(word)`` method.
The bundled implementation reads entries from a MongoDB collection whose
documents look like::

    {"word": "hello", "html": "<p>...</p>", "resources": {"hello.mp3": b"..."}}
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

from pymongo import MongoClient
from pymongo.collection import Collection

from recall import config
from recall.schemas import LookupResult

logger = logging.getLogger(__name__)

COLLECTION_NAME = "lexicon"

# Global connection pool (reused across lookups)
_client: Optional[MongoClient] = None


@runtime_checkable
class Dictionary(Protocol):
    name: str

    def lookup(self, word: str) -> Optional[LookupResult]:
        ...


# ---- Connection Management ----

def get_collection(mongo_uri: Optional[str] = None) -> Collection:
    """
    Get a connection to the MongoDB lexicon collection.

    Uses a persistent client that is reused across calls.

    Returns:
        MongoDB collection object
    """
    global _client

    mongo_uri = mongo_uri or config.get_mongo_uri()
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    if _client is None:
        _client = MongoClient(
            mongo_uri,
            maxPoolSize=10,
            minPoolSize=0,
            serverSelectionTimeoutMS=5000,
        )
    return _client[config.get_lexicon_db_name()][COLLECTION_NAME]


class MongoLexicon:
    """Dictionary backed by a MongoDB collection."""

    def __init__(self, collection: Collection, name: Optional[str] = None):
        self.collection = collection
        self.name = name or getattr(collection, "full_name", COLLECTION_NAME)

    def lookup(self, word: str) -> Optional[LookupResult]:
        doc = self.collection.find_one({"word": word})
        if doc is None:
            return None
        return LookupResult(
            word=word,
            dictionary=self.name,
            html=doc.get("html", ""),
            resources={name: bytes(blob) for name, blob in (doc.get("resources") or {}).items()},
        )

    def add_entry(self, word: str, html: str, resources: Optional[dict[str, bytes]] = None) -> None:
        """Insert or replace the entry for word."""
        self.collection.update_one(
            {"word": word},
            {"$set": {"word": word, "html": html, "resources": resources or {}}},
            upsert=True,
        )


def load_dictionaries() -> list[Dictionary]:
    """Dictionaries available in this environment (empty when none is configured)."""
    if not config.get_mongo_uri():
        return []
    return [MongoLexicon(get_collection(), name="lexicon")]


# ---- Lookup ----

def lookup_all(dictionaries: Iterable[Dictionary], word: str) -> list[LookupResult]:
    """
    Look word up in every dictionary concurrently.

    Returns:
        Hits in dictionary order; dictionaries that fail are logged and skipped
    """
    dictionaries = list(dictionaries)
    if not dictionaries:
        return []

    def _one(dictionary: Dictionary) -> Optional[LookupResult]:
        try:
            return dictionary.lookup(word)
        except Exception:
            logger.exception("Lookup of %r in %s failed", word, dictionary.name)
            return None

    with ThreadPoolExecutor(max_workers=min(8, len(dictionaries))) as pool:
        results = list(pool.map(_one, dictionaries))

    hits = [result for result in results if result is not None]
    if not hits:
        logger.error("%s not found", word)
    return hits


def groom_name(name: str) -> str:
    """Strip characters that would break a quoted path in HTML."""
    return name.replace("'", "").replace('"', "").replace("/", "_")


def create_sub_dir(base_dir: Path, prefer_name: str) -> Path:
    """Create base_dir/prefer_name, or prefer_name-1, -2, ... if taken."""
    name = groom_name(prefer_name) or "entry"
    path = base_dir / name
    i = 1
    while path.exists():
        path = base_dir / f"{name}-{i}"
        i += 1
    path.mkdir(parents=True)
    return path


def write_lookup(result: LookupResult, base_dir: Path) -> Path:
    """
    Write a lookup result to disk.

    Returns:
        Directory containing index.html and the result's resources
    """
    target = create_sub_dir(base_dir, result.word)
    (target / "index.html").write_text(result.html, encoding="utf-8")
    for file_name, blob in result.resources.items():
        resource_path = target / groom_name(Path(file_name).name)
        resource_path.write_bytes(blob)
    return target
