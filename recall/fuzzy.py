"""
Fuzzy Recall - Approximate lookup over stored keys

Used to spot near-duplicates and recover from typos. Not on the review path.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Iterator

from recall.history.item_store import ItemStore


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def is_anagram(s1: str, s2: str) -> bool:
    """True if both strings hold the same multiset of characters."""
    return len(s1) == len(s2) and Counter(s1) == Counter(s2)


def filter_similar(keys: Iterable[str], query: str, max_distance: int) -> Iterator[str]:
    """Yield keys within max_distance edits of query, or anagrams of it."""
    if max_distance < 0:
        raise ValueError(f"max_distance must be >= 0, got {max_distance}")
    for key in keys:
        # Edit distance is at least the length difference
        if abs(len(key) - len(query)) <= max_distance and levenshtein_distance(key, query) <= max_distance:
            yield key
        elif is_anagram(key, query):
            yield key


def find_similar(store: ItemStore, query: str, max_distance: int = 1) -> Iterator[str]:
    """
    Lazily scan every stored key for near matches of query.

    Each call starts a fresh scan; nothing is cached between calls.
    """
    return filter_similar(store.iter_keys(), query, max_distance)
