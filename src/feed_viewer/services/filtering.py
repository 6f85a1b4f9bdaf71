"""Ordering of the post grid for the selected filter mode."""

from typing import Any, Iterable, List

from ..models import FilterMode, PostRecord


def filter_and_sort(posts: Iterable[PostRecord], mode: Any = FilterMode.RECENT) -> List[PostRecord]:
    """
    Return the posts in the order the given mode displays them.

    RECENT keeps the feed's own order. TOP orders by score, highest first;
    posts with equal scores keep their feed order. Unknown modes behave like
    RECENT. The input is never modified.
    """
    if FilterMode.parse(mode) is FilterMode.TOP:
        return sorted(posts, key=lambda post: post.score, reverse=True)
    return list(posts)
