"""Data models for feed posts and the page's view state."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PostRecord(BaseModel):
    """One entry of the fetched feed."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    body_text: str = ""
    score: int = 0
    external_url: Optional[str]


class FeedStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class FilterMode(str, Enum):
    """Orderings the reader can pick for the post grid."""

    RECENT = "recent"
    TOP = "top"

    @property
    def label(self) -> str:
        return "Recent" if self is FilterMode.RECENT else "Top Posts"

    @classmethod
    def parse(cls, value: Any) -> "FilterMode":
        """Map ``value`` to a mode, falling back to RECENT for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.RECENT


class InvalidTransitionError(Exception):
    """Raised when a FeedState is asked to leave a state it cannot leave."""


class FeedState(BaseModel):
    """
    View state for one page view.

    A state starts in LOADING and moves at most once, to READY with the
    fetched posts or to FAILED with the error message. The active filter
    changes independently of that lifecycle. Instances are immutable; every
    transition returns a new state.
    """

    model_config = ConfigDict(frozen=True)

    status: FeedStatus = FeedStatus.LOADING
    posts: List[PostRecord] = Field(default_factory=list)
    error_message: Optional[str] = None
    active_filter: FilterMode = FilterMode.RECENT

    @classmethod
    def loading(cls, active_filter: FilterMode = FilterMode.RECENT) -> "FeedState":
        return cls(active_filter=active_filter)

    def resolve(self, posts: List[PostRecord]) -> "FeedState":
        """Move LOADING -> READY with the fetched posts."""
        self._require_loading("resolve")
        return self.model_copy(update={"status": FeedStatus.READY, "posts": list(posts)})

    def fail(self, message: str) -> "FeedState":
        """Move LOADING -> FAILED carrying ``message`` verbatim."""
        self._require_loading("fail")
        return self.model_copy(update={"status": FeedStatus.FAILED, "error_message": message})

    def with_filter(self, mode: Any) -> "FeedState":
        return self.model_copy(update={"active_filter": FilterMode.parse(mode)})

    def _require_loading(self, action: str) -> None:
        if self.status is not FeedStatus.LOADING:
            raise InvalidTransitionError(
                f"Cannot {action} a feed state that is already {self.status.value}"
            )
