"""
HTTP client for the public content-feed API.

This module loads a subreddit listing, validates the JSON envelope and turns
its entries into PostRecord instances. Each load is a single attempt; there
is no retry logic and no timeout unless one is configured.
"""

from typing import Any, List, Optional
from urllib.parse import urlparse

import httpx
import requests
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..config import get_settings
from ..models import PostRecord


NOT_OK_MESSAGE = "Network response was not ok"
LINK_SCHEMES = frozenset({"http", "https"})


class ListingPost(BaseModel):
    """Fields of a listing entry the viewer relies on."""
    id: str
    title: str
    selftext: Optional[str] = ""
    score: int
    url: str


class ListingChild(BaseModel):
    data: ListingPost


class ListingData(BaseModel):
    children: List[ListingChild]


class ListingEnvelope(BaseModel):
    """Response model for a listing: ``{data: {children: [{data: {...}}]}}``."""
    data: ListingData


class FeedError(Exception):
    """Base exception for feed loading errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NetworkUnavailableError(FeedError):
    """The feed could not be reached or answered with a non-OK status."""


class MalformedBodyError(FeedError):
    """The feed answered but the body is not the expected envelope."""


def is_ok_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def safe_link(url: str) -> Optional[str]:
    """Return ``url`` if it is an absolute http(s) URL, otherwise None."""
    parts = urlparse(url.strip())
    if parts.scheme.lower() in LINK_SCHEMES and parts.netloc:
        return url.strip()
    return None


def parse_feed_envelope(payload: Any) -> List[PostRecord]:
    """
    Extract post records from a decoded listing payload.

    Args:
        payload: Decoded JSON body

    Returns:
        List[PostRecord]: Posts in the order the feed listed them

    Raises:
        MalformedBodyError: If the payload does not match the envelope shape
            or repeats a post id
    """
    try:
        envelope = ListingEnvelope.model_validate(payload)
    except ValidationError as e:
        raise MalformedBodyError(f"Unexpected feed response shape: {e.error_count()} invalid field(s)")

    posts: List[PostRecord] = []
    seen_ids = set()
    for child in envelope.data.children:
        entry = child.data
        if entry.id in seen_ids:
            raise MalformedBodyError(f"Duplicate post id in feed response: {entry.id}")
        seen_ids.add(entry.id)
        external_url = safe_link(entry.url)
        if external_url is None:
            logger.warning(f"Dropping unsafe link on post {entry.id}")
        posts.append(PostRecord(
            id=entry.id,
            title=entry.title,
            body_text=entry.selftext or "",
            score=entry.score,
            external_url=external_url,
        ))
    return posts


class FeedAPIClient:
    """
    HTTP client for the content-feed listing endpoint.

    ``load`` performs a blocking request and suits the Streamlit script
    model; ``load_async`` performs the same request on an asyncio event loop
    so callers can cancel it.
    """

    def __init__(
        self,
        feed_url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None
    ):
        """
        Initialize the feed client.

        Args:
            feed_url: Listing endpoint to load
            timeout: Request timeout in seconds, None to wait indefinitely
            user_agent: User-Agent header value
        """
        settings = get_settings()
        self.feed_url = feed_url or settings.feed_url
        self.timeout = timeout if timeout is not None else settings.feed_request_timeout
        self.headers = {"User-Agent": user_agent or settings.user_agent}

        logger.info(f"Initialized FeedAPIClient with feed_url: {self.feed_url}")

    def load(self) -> List[PostRecord]:
        """
        Fetch the feed once and return its posts.

        Returns:
            List[PostRecord]: Posts in feed order

        Raises:
            NetworkUnavailableError: If the request fails or the status is not OK
            MalformedBodyError: If the body is not the expected envelope
        """
        logger.debug(f"Making GET request to {self.feed_url}")
        try:
            response = requests.get(self.feed_url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkUnavailableError(f"Request failed: {str(e)}")

        return self._handle_response(response)

    async def load_async(self) -> List[PostRecord]:
        """
        Fetch the feed once without blocking the event loop.

        Same contract as ``load``. Cancelling the awaiting task aborts the
        in-flight request.
        """
        logger.debug(f"Making async GET request to {self.feed_url}")
        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(self.feed_url)
            except httpx.HTTPError as e:
                raise NetworkUnavailableError(f"Request failed: {str(e)}")

        return self._handle_response(response)

    def _handle_response(self, response) -> List[PostRecord]:
        if not is_ok_status(response.status_code):
            logger.warning(f"Feed request returned HTTP {response.status_code}")
            raise NetworkUnavailableError(NOT_OK_MESSAGE, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedBodyError(f"Failed to decode feed response: {str(e)}", response.status_code)

        posts = parse_feed_envelope(payload)
        logger.info(f"Loaded {len(posts)} posts from {self.feed_url}")
        return posts
