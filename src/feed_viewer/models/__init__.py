"""Models package for feed viewer."""

from .post import (
    FeedState,
    FeedStatus,
    FilterMode,
    InvalidTransitionError,
    PostRecord,
)

__all__ = [
    "FeedState",
    "FeedStatus",
    "FilterMode",
    "InvalidTransitionError",
    "PostRecord",
]
