"""API client package for feed viewer."""

from .client import (
    FeedAPIClient,
    FeedError,
    MalformedBodyError,
    NetworkUnavailableError,
    parse_feed_envelope,
)

__all__ = [
    "FeedAPIClient",
    "FeedError",
    "MalformedBodyError",
    "NetworkUnavailableError",
    "parse_feed_envelope",
]
