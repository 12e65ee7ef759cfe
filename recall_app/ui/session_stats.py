"""
Session Statistics UI

Renders progress metrics and controls.
"""

import streamlit as st


def render_session_stats(due_left: int) -> bool:
    """
    Render pass progress metrics and a new-pass button.

    Args:
        due_left: Items still due and not yet shown in this pass

    Returns:
        True if the new-pass button was clicked, False otherwise
    """
    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        st.metric("Due", due_left)

    with col2:
        st.metric("Reviewed", st.session_state.session_count)

    with col3:
        if st.session_state.session_count > 0:
            recalled = st.session_state.session_correct / st.session_state.session_count * 100
            st.metric("Recalled", f"{recalled:.0f}%")

    with col4:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("🔄", help="Start a new pass", use_container_width=True):
            return True

    st.divider()
    return False


def render_session_complete():
    """Render pass completion message."""
    st.success("🎉 Congratulation! All cards reviewed")
    if st.session_state.session_count > 0:
        recalled = st.session_state.session_correct / st.session_state.session_count * 100
        st.info(f"You reviewed {st.session_state.session_count} words, recalled {recalled:.1f}%.")
