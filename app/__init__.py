"""Streamlit frontend for Finance Manager."""
