"""
Services module for feed viewer.

This module provides the feed controller and the rendering pipeline it uses.
"""

from .feed_service import FeedController, build_cards
from .filtering import filter_and_sort
from .rendering import PostCard, SafeNode, render_excerpt, sanitize_markup, truncate

__all__ = [
    "FeedController",
    "PostCard",
    "SafeNode",
    "build_cards",
    "filter_and_sort",
    "render_excerpt",
    "sanitize_markup",
    "truncate",
]
