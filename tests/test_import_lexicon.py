import pytest

from recall.lexicon_repo import MongoLexicon
from scripts.data.import_lexicon import import_entries, iter_entries


@pytest.fixture
def source_dir(tmp_path):
    (tmp_path / "hello.html").write_text("<b>hello</b>", encoding="utf-8")
    (tmp_path / "hello").mkdir()
    (tmp_path / "hello" / "hello.mp3").write_bytes(b"ID3")
    (tmp_path / "world.html").write_text("<i>world</i>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    return tmp_path


def test_iter_entries(source_dir):
    assert list(iter_entries(source_dir)) == [
        ("hello", "<b>hello</b>", {"hello.mp3": b"ID3"}),
        ("world", "<i>world</i>", {}),
    ]


def test_import_entries_upserts_into_lexicon(source_dir, fake_collection):
    lexicon = MongoLexicon(fake_collection([{"word": "hello", "html": "old"}]), name="main")

    assert import_entries(lexicon, source_dir) == 2

    assert lexicon.lookup("hello").html == "<b>hello</b>"
    assert lexicon.lookup("hello").resources == {"hello.mp3": b"ID3"}
    assert lexicon.lookup("world").html == "<i>world</i>"


def test_dry_run_writes_nothing(source_dir, fake_collection):
    collection = fake_collection()
    assert import_entries(MongoLexicon(collection), source_dir, dry_run=True) == 2
    assert collection.docs == {}


def test_missing_source_dir(tmp_path, fake_collection):
    with pytest.raises(FileNotFoundError):
        import_entries(MongoLexicon(fake_collection()), tmp_path / "nope")
