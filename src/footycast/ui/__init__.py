"""Streamlit dashboard for FootyCast."""
