"""
Feed Viewer - community post browser for a public content feed.

This package provides a Streamlit-based page that loads the latest posts of a
subreddit listing, renders their markup through an allow-list sanitizer and
lets the reader switch between recent and top-scored ordering.
"""

__version__ = "1.0.0"
