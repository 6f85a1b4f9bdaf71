"""Shared fixtures for the feed viewer test-suite."""

from typing import Any, Dict

import pytest

from feed_viewer.config import get_settings
from tests.factories import make_entry, make_listing


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached process-wide; give every test a clean read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def listing_payload() -> Dict[str, Any]:
    """Three posts with scores 5, 20 and 1, in feed order."""
    return make_listing([
        make_entry("a1", 5, selftext="<p>first</p>"),
        make_entry("b2", 20, selftext=""),
        make_entry("c3", 1, selftext="plain body"),
    ])
