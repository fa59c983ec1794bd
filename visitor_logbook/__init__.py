"""Visitor Logbook - Streamlit front end for the visitor logbook API"""

__version__ = "1.0.0"
