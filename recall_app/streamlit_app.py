"""
Recall - Review Page

Streamlit UI over the shared Reviewer. Launch with ``recall review --ui``
or ``streamlit run recall_app/streamlit_app.py``.
"""

import logging

import streamlit as st

from recall import config, lexicon_repo
from recall.errors import RecallError
from recall.fsrs import Rating
from recall.history import ItemStore, Reviewer, get_engine
from recall.logging_config import configure_logging
from recall.schemas import FeedbackRequest
from recall_app.ui import (
    render_feedback_buttons,
    render_flashcard,
    render_lookup,
    render_session_complete,
    render_session_stats,
)

logger = logging.getLogger(__name__)


# ---- Page Setup ----

st.set_page_config(
    page_title="Recall",
    page_icon="🧠",
    layout="centered"
)


# ---- Shared Resources ----

@st.cache_resource
def get_reviewer() -> Reviewer:
    """One Reviewer per server process (its lock serializes reruns)."""
    configure_logging(config.get_log_level())
    return Reviewer(ItemStore(get_engine()))


@st.cache_resource
def get_dictionaries() -> list:
    return lexicon_repo.load_dictionaries()


# ---- Session State Initialization ----

def _init_session_state():
    """Initialize all session state variables."""
    if "current_item" not in st.session_state:
        st.session_state.current_item = None
    if "show_answer" not in st.session_state:
        st.session_state.show_answer = False
    if "session_count" not in st.session_state:
        st.session_state.session_count = 0
    if "session_correct" not in st.session_state:
        st.session_state.session_correct = 0
    if "pass_complete" not in st.session_state:
        st.session_state.pass_complete = False


_init_session_state()


# ---- Review Flow ----

def advance():
    """Fetch the next item of the pass into session state."""
    st.session_state.show_answer = False
    item = get_reviewer().next()
    st.session_state.current_item = item
    st.session_state.pass_complete = item is None


def process_feedback(request: FeedbackRequest):
    rating = request.rating
    try:
        get_reviewer().record_feedback(request.word, rating)
    except RecallError as e:
        logger.error("Rating %s for %r failed: %s", rating.name, request.word, e)
        st.error(f"Could not save rating: {e}")
        return
    st.session_state.session_count += 1
    if rating != Rating.AGAIN:
        st.session_state.session_correct += 1
    advance()
    st.rerun()


def start_new_pass():
    get_reviewer().new_pass()
    st.session_state.session_count = 0
    st.session_state.session_correct = 0
    advance()


# ---- UI Rendering ----

def render_test_mode_warning():
    """Show warning if in test mode."""
    if config.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using test_history.db (set TEST_MODE=false in .env for production)")


def _phase_label(item) -> str:
    return getattr(item.state.phase, "value", str(item.state.phase))


def render_card():
    item = st.session_state.current_item

    st.markdown("<br>", unsafe_allow_html=True)

    if not st.session_state.show_answer:
        render_flashcard(item.key, corner_text=_phase_label(item))
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Reveal Answer", use_container_width=True, type="primary"):
            st.session_state.show_answer = True
            st.rerun()
        return

    render_flashcard(item.key, corner_text=_phase_label(item), revealed=True)
    st.markdown("<br>", unsafe_allow_html=True)

    rating = render_feedback_buttons(key_suffix=f"{item.row_id}_{st.session_state.session_count}")
    if rating is not None:
        process_feedback(FeedbackRequest(word=item.key, rating=rating))

    hits = lexicon_repo.lookup_all(get_dictionaries(), item.key)
    if not hits:
        st.caption("No dictionary entry found.")
    for result in hits:
        render_lookup(result)


# ---- Main App ----

def main():
    """Main app entry point."""
    st.title("🧠 Recall")
    render_test_mode_warning()

    reviewer = get_reviewer()
    if st.session_state.current_item is None and not st.session_state.pass_complete:
        advance()

    due_left = reviewer.store.count_due(exclude_session=reviewer.session_id)
    if render_session_stats(due_left):
        start_new_pass()
        st.rerun()

    if st.session_state.pass_complete:
        if st.session_state.session_count > 0:
            render_session_complete()
        else:
            st.info("No word to review")
        return

    render_card()

    if config.is_test_mode():
        st.caption("TEST MODE - Using test_history.db")


main()
