"""
Flashcard UI Component

Renders the word card and the dictionary entries shown on its back.
"""

from __future__ import annotations

import base64
import html as html_lib
import mimetypes

import streamlit as st

from recall.schemas import LookupResult

CARD_PADDING = "35px 24px"
CARD_MIN_HEIGHT = "210px"
FRONT_BG_COLOR = "#f0f2f6"
BACK_BG_COLOR = "#e8f4f8"


def render_flashcard(main_text: str, corner_text: str = "", revealed: bool = False) -> None:
    """
    Render a flashcard.

    Args:
        main_text: The word, centered in large type
        corner_text: Optional text in top-right corner (learning phase)
        revealed: Use the back-of-card background
    """
    bg_color = BACK_BG_COLOR if revealed else FRONT_BG_COLOR

    corner_html = ""
    if corner_text:
        corner_html = (
            '<div style="position: absolute; top: 15px; right: 20px; font-size: 0.9em; '
            f'color: #666; font-style: italic;">{html_lib.escape(corner_text)}</div>'
        )

    main_html = (
        '<h1 style="font-size: 2.5em; color: #1f1f1f; font-weight: normal; margin: 0; '
        'text-align: center; overflow-wrap: anywhere; word-break: break-word;">'
        f"{html_lib.escape(main_text)}</h1>"
    )

    card = (
        f'<div style="background-color: {bg_color}; padding: {CARD_PADDING}; '
        'border-radius: 15px; text-align: center; box-shadow: 0 4px 6px '
        f'rgba(0, 0, 0, 0.1); min-height: {CARD_MIN_HEIGHT}; display: flex; '
        'flex-direction: column; align-items: center; justify-content: center; '
        f'position: relative;">{corner_html}{main_html}</div>'
    )

    st.markdown(card, unsafe_allow_html=True)


def render_lookup(result: LookupResult) -> None:
    """Show one dictionary entry, with audio resources as players."""
    with st.expander(result.dictionary, expanded=True):
        st.markdown(result.html, unsafe_allow_html=True)
        for name, blob in result.resources.items():
            mime, _ = mimetypes.guess_type(name)
            if mime and mime.startswith("audio/"):
                st.audio(blob, format=mime)
            elif mime and mime.startswith("image/"):
                encoded = base64.b64encode(blob).decode("ascii")
                st.markdown(f'<img src="data:{mime};base64,{encoded}"/>', unsafe_allow_html=True)
