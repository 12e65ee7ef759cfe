"""
Import dictionary entries from a directory into the MongoDB lexicon.

Expected layout:
    <source>/hello.html        display payload for "hello"
    <source>/hello/            optional resources referenced by hello.html
        hello.mp3

Existing entries with the same word are replaced.

Usage:
    python -m scripts.data.import_lexicon SOURCE_DIR [--dry-run]
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterator

from recall import config
from recall.lexicon_repo import COLLECTION_NAME, MongoLexicon, get_collection


def iter_entries(source_dir: Path) -> Iterator[tuple[str, str, dict[str, bytes]]]:
    """
    Yield (word, html, resources) for every ``*.html`` file in source_dir.

    Args:
        source_dir: Directory laid out as described in the module docstring

    Returns:
        Entries sorted by word
    """
    for html_path in sorted(source_dir.glob("*.html")):
        word = html_path.stem
        resource_dir = source_dir / word
        resources = {}
        if resource_dir.is_dir():
            resources = {
                path.name: path.read_bytes()
                for path in sorted(resource_dir.iterdir())
                if path.is_file()
            }
        yield word, html_path.read_text(encoding="utf-8"), resources


def import_entries(lexicon: MongoLexicon, source_dir: Path, dry_run: bool = False) -> int:
    """
    Upsert every entry found in source_dir.

    Returns:
        Number of entries imported (or that would be, with dry_run)
    """
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")

    count = 0
    for word, html, resources in iter_entries(source_dir):
        if dry_run:
            print(f"  would import {word} ({len(resources)} resources)")
        else:
            lexicon.add_entry(word, html, resources)
        count += 1
    return count


def main():
    parser = argparse.ArgumentParser(description="Import dictionary entries into the lexicon")
    parser.add_argument("source", type=Path, help="Directory of <word>.html files")
    parser.add_argument("--dry-run", action="store_true", help="List entries without writing")
    args = parser.parse_args()

    print("Connecting to MongoDB...")
    lexicon = MongoLexicon(get_collection(), name="lexicon")
    print(f"✓ Connected to MongoDB: {config.get_lexicon_db_name()}.{COLLECTION_NAME}\n")

    count = import_entries(lexicon, args.source, dry_run=args.dry_run)
    verb = "Would import" if args.dry_run else "Imported"
    print(f"\n{verb} {count} entries from {args.source}")


if __name__ == "__main__":
    main()
