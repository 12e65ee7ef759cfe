"""UI Components for the review page"""

from recall_app.ui.flashcard import render_flashcard, render_lookup
from recall_app.ui.session_stats import render_session_stats, render_session_complete
from recall_app.ui.feedback_buttons import render_feedback_buttons

__all__ = [
    "render_flashcard",
    "render_lookup",
    "render_session_stats",
    "render_session_complete",
    "render_feedback_buttons",
]
