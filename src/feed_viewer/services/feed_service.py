"""
Feed service module for feed viewer.

This module owns the page's FeedState and is the only place that moves it:
load completion, filter selection and an explicit refresh.
"""

import asyncio
from typing import Any, Iterable, List, Optional

from loguru import logger

from ..api import FeedAPIClient, FeedError
from ..config import get_settings
from ..models import FeedState, FeedStatus, FilterMode, PostRecord
from .filtering import filter_and_sort
from .rendering import DEFAULT_MAX_LENGTH, PostCard, build_card


def build_cards(
    posts: Iterable[PostRecord],
    mode: Any = FilterMode.RECENT,
    max_length: int = DEFAULT_MAX_LENGTH
) -> List[PostCard]:
    """Order ``posts`` for ``mode`` and render each one into a card."""
    return [build_card(post, max_length) for post in filter_and_sort(posts, mode)]


class FeedController:
    """
    Controller for the single feed view.

    Holds the current FeedState and applies its transitions. A lifecycle
    performs at most one load; ``refresh`` starts a new lifecycle.
    """

    def __init__(self, api_client: FeedAPIClient, excerpt_length: Optional[int] = None):
        """
        Initialize the controller.

        Args:
            api_client: Client used to load the feed
            excerpt_length: Visible characters of body text per card
        """
        self.api_client = api_client
        self.settings = get_settings()
        self.excerpt_length = excerpt_length or self.settings.excerpt_length
        self.state = FeedState.loading()
        self._task: Optional[asyncio.Task] = None

    def load(self) -> FeedState:
        """
        Load the feed if this lifecycle has not loaded yet.

        Returns:
            FeedState: READY with posts or FAILED with the error message
        """
        if self.state.status is not FeedStatus.LOADING:
            return self.state

        try:
            posts = self.api_client.load()
        except FeedError as e:
            return self._fail(e)
        return self._resolve(posts)

    async def load_async(self) -> FeedState:
        """Async variant of ``load``; the state stays LOADING if cancelled."""
        if self.state.status is not FeedStatus.LOADING:
            return self.state

        try:
            posts = await self.api_client.load_async()
        except asyncio.CancelledError:
            logger.info("Feed load cancelled before completion")
            raise
        except FeedError as e:
            return self._fail(e)
        return self._resolve(posts)

    def start(self) -> asyncio.Task:
        """Schedule ``load_async`` on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.ensure_future(self.load_async())
        return self._task

    def cancel(self) -> bool:
        """
        Cancel an in-flight async load, e.g. when the view is torn down.

        Returns:
            bool: True if a pending load was cancelled
        """
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    def refresh(self) -> FeedState:
        """Start a new lifecycle, keeping the active filter, and load again."""
        self.cancel()
        self.state = FeedState.loading(self.state.active_filter)
        logger.debug("Feed state reset for refresh")
        return self.load()

    def select_filter(self, mode: Any) -> FeedState:
        self.state = self.state.with_filter(mode)
        logger.debug(f"Active filter set to {self.state.active_filter.value}")
        return self.state

    def visible_posts(self) -> List[PostRecord]:
        if self.state.status is not FeedStatus.READY:
            return []
        return filter_and_sort(self.state.posts, self.state.active_filter)

    def cards(self) -> List[PostCard]:
        if self.state.status is not FeedStatus.READY:
            return []
        return build_cards(self.state.posts, self.state.active_filter, self.excerpt_length)

    def _resolve(self, posts: List[PostRecord]) -> FeedState:
        self.state = self.state.resolve(posts)
        logger.debug(f"Feed state -> {self.state.status.value} ({len(posts)} posts)")
        return self.state

    def _fail(self, error: FeedError) -> FeedState:
        logger.error(f"Error fetching posts: {error.message}")
        self.state = self.state.fail(error.message)
        return self.state
