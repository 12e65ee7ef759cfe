"""
Command-line entry point.

Usage:
    recall lookup WORD            look a word up and add it to the history
    recall review [--ui]          review due words (terminal or Streamlit)
    recall forget WORD            remove a word from the history
    recall similar QUERY [-d N]   near matches among stored words
    recall search TEXT            prefix search over stored words
    recall stats                  item/session counts
    recall show-path              database and log locations
    recall list-dicts             configured dictionaries
    recall --version
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from recall import __version__, config, fuzzy, lexicon_repo
from recall.errors import InvalidRating, ItemNotFound, RecallError
from recall.fsrs.constants import Rating
from recall.history import ItemStore, Reviewer, add_history, create_history_engine
from recall.logging_config import configure_logging

logger = logging.getLogger(__name__)

STREAMLIT_APP = Path(__file__).resolve().parent.parent / "recall_app" / "streamlit_app.py"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recall", description="Spaced repetition for looked-up words")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    lookup = sub.add_parser("lookup", help="Look a word up and add it to the history")
    lookup.add_argument("word")

    review = sub.add_parser("review", help="Review due words")
    review.add_argument("--ui", action="store_true", help="Open the Streamlit review page instead")

    forget = sub.add_parser("forget", help="Remove a word from the history")
    forget.add_argument("word")

    similar = sub.add_parser("similar", help="Stored words close to QUERY (typos, anagrams)")
    similar.add_argument("query")
    similar.add_argument("-d", "--max-distance", type=int, default=1)

    search = sub.add_parser("search", help="Prefix search over stored words")
    search.add_argument("text")
    search.add_argument("-n", "--limit", type=int, default=20)

    sub.add_parser("stats", help="Show history counts")
    sub.add_parser("show-path", help="Show database and log locations")
    sub.add_parser("list-dicts", help="List the configured dictionaries")
    return parser


# ---- Commands ----

def cmd_lookup(store: ItemStore, word: str) -> int:
    """Show the dictionary entries for word; only words that were found enter the history."""
    logger.info("%s", word)
    hits = lexicon_repo.lookup_all(lexicon_repo.load_dictionaries(), word)
    if not hits:
        print(f"{word!r} not found", file=sys.stderr)
        return 1

    base_dir = Path(tempfile.mkdtemp(prefix=f"{lexicon_repo.groom_name(word)}-"))
    for result in hits:
        path = lexicon_repo.write_lookup(result, base_dir)
        print(f"[{result.dictionary}] {path / 'index.html'}")
    if add_history(store, word):
        print(f"added {word!r} to history")
    return 0


def review_loop(
    reviewer: Reviewer,
    dictionaries: Sequence[lexicon_repo.Dictionary] = (),
    input_fn: Optional[Callable[[str], str]] = None,
) -> int:
    """
    Interactive review in the terminal.

    Returns:
        Number of words rated
    """
    input_fn = input_fn or input
    reviewed = 0
    with tempfile.TemporaryDirectory(prefix="review-") as tmp:
        while True:
            item = reviewer.next()
            if item is None:
                print("no word to review" if reviewed == 0 else "Congratulation! All cards reviewed")
                return reviewed

            print(f"\n== {item.key}")
            if input_fn("[Enter] show answer, q to quit: ").strip().lower() == "q":
                return reviewed

            for result in lexicon_repo.lookup_all(dictionaries, item.key):
                path = lexicon_repo.write_lookup(result, Path(tmp))
                print(f"[{result.dictionary}] {path / 'index.html'}")

            while True:
                raw = input_fn("1=again 2=hard 3=good 4=easy (q to quit): ").strip()
                if raw.lower() == "q":
                    return reviewed
                try:
                    rating = Rating.parse(raw)
                    break
                except InvalidRating as exc:
                    print(exc)

            updated = reviewer.record_feedback(item.key, rating)
            print(f"{item.key} {rating.name.lower()} -> next review {updated.due_at:%Y-%m-%d %H:%M} UTC")
            reviewed += 1


def cmd_review(store: ItemStore, ui: bool) -> int:
    if ui:
        return subprocess.call([sys.executable, "-m", "streamlit", "run", str(STREAMLIT_APP)])

    log_path = config.get_log_dir() / f"log.{datetime.now().astimezone().isoformat()}"
    configure_logging(config.get_log_level(), log_file=log_path)
    print(f"log file: {log_path}")
    review_loop(Reviewer(store), lexicon_repo.load_dictionaries())
    return 0


def cmd_forget(store: ItemStore, word: str) -> int:
    if store.remove_item(word) == 0:
        raise ItemNotFound(word)
    print(f"forgot {word!r}")
    return 0


def cmd_similar(store: ItemStore, query: str, max_distance: int) -> int:
    for key in fuzzy.find_similar(store, query, max_distance):
        print(key)
    return 0


def cmd_search(store: ItemStore, text: str, limit: int) -> int:
    for key in store.search(text, limit):
        print(key)
    return 0


def cmd_stats(store: ItemStore) -> int:
    print(f"items     {store.count_items()}")
    print(f"due now   {store.count_due()}")
    print(f"sessions  {store.count_sessions()}")
    return 0


def cmd_show_path() -> int:
    print(f"history database          {config.get_database_url()}")
    print(f"log dir                   {config.get_log_dir()}")
    return 0


def cmd_list_dicts() -> int:
    dictionaries = lexicon_repo.load_dictionaries()
    if not dictionaries:
        print("no dictionary found (set MONGO_URI to use the lexicon collection)")
        return 0
    for dictionary in dictionaries:
        print(dictionary.name)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(config.get_log_level())

    if args.command == "show-path":
        return cmd_show_path()
    if args.command == "list-dicts":
        return cmd_list_dicts()

    engine = create_history_engine()
    try:
        store = ItemStore(engine)
        if args.command == "lookup":
            return cmd_lookup(store, args.word)
        if args.command == "review":
            return cmd_review(store, args.ui)
        if args.command == "forget":
            return cmd_forget(store, args.word)
        if args.command == "similar":
            return cmd_similar(store, args.query, args.max_distance)
        if args.command == "search":
            return cmd_search(store, args.text, args.limit)
        if args.command == "stats":
            return cmd_stats(store)
    except (ItemNotFound, InvalidRating) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except RecallError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
