"""
Safe rendering of post bodies.

Post bodies come from an untrusted feed. They are reduced to a small
allow-list of inline and list markup with bleach, then parsed with
BeautifulSoup into a display tree that the page embeds as HTML.
"""

from dataclasses import dataclass
from typing import Optional

import bleach
from bs4 import BeautifulSoup, NavigableString
from loguru import logger

from ..models import PostRecord


ALLOWED_TAGS = frozenset({"p", "b", "i", "em", "strong", "a", "ul", "ol", "li", "br"})
ALLOWED_ATTRIBUTES = ["href", "target", "rel"]
ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

# Dropped with their contents; everything else outside the allow-list keeps its text.
DROPPED_ELEMENTS = ("script", "style", "noscript", "template", "iframe", "object", "embed")

ELLIPSIS = "..."
DEFAULT_MAX_LENGTH = 200

_PARSER = "html.parser"


class SafeNode:
    """A sanitized fragment parsed into a display tree."""

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    @classmethod
    def from_clean_html(cls, html: str) -> "SafeNode":
        return cls(BeautifulSoup(html, _PARSER))

    @property
    def html(self) -> str:
        return str(self._soup)

    @property
    def text(self) -> str:
        """Visible text of the fragment."""
        return self._soup.get_text()

    def find_all(self, *args, **kwargs):
        return self._soup.find_all(*args, **kwargs)

    def truncated(self, max_length: int = DEFAULT_MAX_LENGTH) -> "SafeNode":
        """
        Return a copy cut to ``max_length`` visible characters plus an ellipsis.

        The cut happens inside a text node, and everything after it is
        removed from the tree, so the markup stays balanced.
        """
        if len(self.text) <= max_length:
            return self

        soup = BeautifulSoup(self.html, _PARSER)
        consumed = 0
        for string in soup.find_all(string=True):
            if consumed + len(string) < max_length:
                consumed += len(string)
                continue

            tail = NavigableString(str(string)[:max_length - consumed] + ELLIPSIS)
            string.replace_with(tail)
            node = tail
            while node is not None and node is not soup:
                for sibling in list(node.next_siblings):
                    sibling.extract()
                node = node.parent
            break

        return SafeNode(soup)

    def __repr__(self) -> str:
        return f"SafeNode({self.html!r})"


def sanitize_markup(html: Optional[str]) -> Optional[SafeNode]:
    """
    Reduce untrusted HTML to the allowed subset.

    Script-bearing elements are dropped with their contents, other tags outside
    the allow-list are stripped, attributes are limited to href/target/rel and
    hrefs to http, https and mailto URLs.

    Args:
        html: Possibly empty HTML fragment

    Returns:
        SafeNode or None when there is nothing to display. Never raises.
    """
    if not html:
        return None

    try:
        raw = BeautifulSoup(html, _PARSER)
        for element in raw.find_all(DROPPED_ELEMENTS):
            element.decompose()

        cleaned = bleach.clean(
            str(raw),
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            protocols=ALLOWED_PROTOCOLS,
            strip=True,
            strip_comments=True,
        )
        node = SafeNode.from_clean_html(cleaned)
    except Exception as e:
        logger.warning(f"Error parsing HTML: {e}")
        return None

    if not node.html.strip():
        return None
    return node


def truncate(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Cut ``text`` to ``max_length`` characters followed by an ellipsis when longer."""
    if len(text) > max_length:
        return text[:max_length] + ELLIPSIS
    return text


def render_excerpt(text: Optional[str], max_length: int = DEFAULT_MAX_LENGTH) -> Optional[SafeNode]:
    """Sanitize a post body, then shorten its visible text to ``max_length``."""
    node = sanitize_markup(text)
    if node is None:
        return None

    try:
        return node.truncated(max_length)
    except Exception as e:
        logger.warning(f"Error truncating post body: {e}")
        return None


@dataclass(frozen=True)
class PostCard:
    """What the page shows for one post."""
    id: str
    title: str
    score: int
    external_url: Optional[str]
    body_html: Optional[str] = None


def build_card(post: PostRecord, max_length: int = DEFAULT_MAX_LENGTH) -> PostCard:
    excerpt = render_excerpt(post.body_text, max_length)
    return PostCard(
        id=post.id,
        title=post.title,
        score=post.score,
        external_url=post.external_url,
        body_html=excerpt.html if excerpt is not None else None,
    )
