"""Streamlit front-end for reviewing the word history."""
