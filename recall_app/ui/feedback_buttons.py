"""
Feedback Button UI

Renders the four rating buttons under a revealed card.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from recall.fsrs import Rating

BUTTONS = [
    (Rating.AGAIN, "❌ Again", "Could not remember it"),
    (Rating.HARD, "😰 Hard", "Remembered with a lot of effort"),
    (Rating.GOOD, "👍 Good", "Remembered it"),
    (Rating.EASY, "✨ Easy", "Remembered it instantly"),
]


def render_feedback_buttons(key_suffix: str = "") -> Optional[Rating]:
    """
    Render feedback rating buttons in one row.

    Args:
        key_suffix: Makes widget keys unique per card

    Returns:
        Rating selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this word?**")

    selected = None
    for column, (rating, label, help_text) in zip(st.columns(len(BUTTONS)), BUTTONS):
        with column:
            if st.button(label, key=f"rate_{rating.name}_{key_suffix}", help=help_text, use_container_width=True):
                selected = rating
    return selected
