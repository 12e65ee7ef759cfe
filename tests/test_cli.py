import pytest

from recall import __version__, cli
from recall.history import ItemStore, create_history_engine
from recall.schemas import LookupResult


class WordListDictionary:
    """Finds only the words it was given."""

    name = "words"

    def __init__(self, *words):
        self.words = set(words)

    def lookup(self, word):
        if word not in self.words:
            return None
        return LookupResult(word=word, dictionary=self.name, html=f"<p>{word}</p>")


@pytest.fixture
def dictionary(monkeypatch):
    """Configure a single dictionary that knows a handful of words."""
    found = WordListDictionary("hello", "help", "livers", "cat", " indented")
    monkeypatch.setattr(cli.lexicon_repo, "load_dictionaries", lambda: [found])
    return found


@pytest.fixture
def feed_input(monkeypatch):
    """Replace input() with a scripted sequence of answers."""
    def _feed(*answers):
        answers = iter(answers)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    return _feed


def _open_store(db_url):
    engine = create_history_engine(db_url)
    return engine, ItemStore(engine)


def test_lookup_adds_to_history(cli_env, dictionary, capsys):
    assert cli.main(["lookup", "hello"]) == 0
    out = capsys.readouterr().out
    assert "[words] " in out
    assert "index.html" in out
    assert "added 'hello'" in out

    assert cli.main(["stats"]) == 0
    out = capsys.readouterr().out
    assert "items     1" in out
    assert "due now   1" in out
    assert "sessions  0" in out


def test_lookup_miss_is_not_recorded(cli_env, dictionary, capsys):
    assert cli.main(["lookup", "helo"]) == 1
    captured = capsys.readouterr()
    assert "'helo' not found" in captured.err
    assert "added" not in captured.out

    cli.main(["stats"])
    assert "items     0" in capsys.readouterr().out


def test_lookup_without_dictionaries_fails(cli_env, capsys):
    assert cli.main(["lookup", "hello"]) == 1
    assert "not found" in capsys.readouterr().err


def test_lookup_ignores_blank_words(cli_env, dictionary, capsys):
    assert cli.main(["lookup", " indented"]) == 0
    assert "added" not in capsys.readouterr().out

    cli.main(["stats"])
    assert "items     0" in capsys.readouterr().out


def test_forget(cli_env, dictionary, capsys):
    cli.main(["lookup", "hello"])
    assert cli.main(["forget", "hello"]) == 0
    assert cli.main(["forget", "hello"]) == 1
    assert "not found" in capsys.readouterr().err


def test_similar_and_search(cli_env, dictionary, capsys):
    for word in ["livers", "hello", "help"]:
        cli.main(["lookup", word])
    capsys.readouterr()

    assert cli.main(["similar", "sliver", "--max-distance", "0"]) == 0
    assert capsys.readouterr().out.split() == ["livers"]

    assert cli.main(["search", "hel"]) == 0
    assert capsys.readouterr().out.split() == ["hello", "help"]


def test_show_path(cli_env, db_url, capsys):
    assert cli.main(["show-path"]) == 0
    out = capsys.readouterr().out
    assert db_url in out
    assert str(cli_env / "logs") in out


def test_list_dicts(cli_env, dictionary, capsys):
    assert cli.main(["list-dicts"]) == 0
    assert capsys.readouterr().out.split() == ["words"]


def test_list_dicts_when_none_configured(cli_env, capsys):
    assert cli.main(["list-dicts"]) == 0
    assert "no dictionary found" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"recall {__version__}"


def test_review_with_nothing_due(cli_env, capsys):
    assert cli.main(["review"]) == 0
    out = capsys.readouterr().out
    assert "no word to review" in out
    assert "log file:" in out


def test_review_rates_each_word(cli_env, dictionary, capsys, feed_input, db_url):
    cli.main(["lookup", "hello"])
    feed_input("", "bogus", "easy")

    assert cli.main(["review"]) == 0

    out = capsys.readouterr().out
    assert "== hello" in out
    assert "[words] " in out
    assert "invalid rating 'bogus'" in out
    assert "hello easy -> next review" in out
    assert "Congratulation! All cards reviewed" in out

    engine, store = _open_store(db_url)
    try:
        assert store.count_due() == 0
        assert store.count_sessions() == 1
        assert store.recent_events()[0]["rating"] == "easy"
    finally:
        engine.dispose()


def test_review_quit(cli_env, dictionary, feed_input, db_url):
    cli.main(["lookup", "hello"])
    feed_input("q")

    assert cli.main(["review"]) == 0

    engine, store = _open_store(db_url)
    try:
        assert store.recent_events() == []
    finally:
        engine.dispose()


def test_review_loop_with_scripted_input(store, reviewer, clock):
    store.ensure_item("cat")
    store.ensure_item("dog")
    answers = iter(["", "good", "", "4"])

    assert cli.review_loop(reviewer, input_fn=lambda prompt: next(answers)) == 2
    assert store.count_due() == 0


@pytest.mark.parametrize("odd_digit", ["²", "①", "7"])
def test_review_loop_reprompts_on_odd_digits(store, reviewer, capsys, odd_digit):
    store.ensure_item("cat")
    answers = iter(["", odd_digit, "good"])

    assert cli.review_loop(reviewer, input_fn=lambda prompt: next(answers)) == 1
    assert f"invalid rating {odd_digit!r}" in capsys.readouterr().out


def test_review_ui_launches_streamlit(cli_env, monkeypatch):
    calls = []
    monkeypatch.setattr(cli.subprocess, "call", lambda args: calls.append(args) or 0)

    assert cli.main(["review", "--ui"]) == 0
    assert calls[0][1:4] == ["-m", "streamlit", "run"]
    assert calls[0][4].endswith("streamlit_app.py")
