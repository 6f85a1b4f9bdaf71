"""
Streamlit page for browsing the community feed.

Single page:
- Loads the feed once per browser session
- Recent / Top Posts toggle
- Grid of post cards with sanitized body excerpts
"""

import re
from typing import List

import streamlit as st
from loguru import logger

from feed_viewer.api import FeedAPIClient
from feed_viewer.config import get_settings
from feed_viewer.models import FeedStatus, FilterMode
from feed_viewer.services import FeedController, PostCard
from feed_viewer.utils import setup_logging

GRID_COLUMNS = 3
MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~$])")


def setup_page_config() -> None:
    """Configure Streamlit page settings."""
    st.set_page_config(
        page_title=get_settings().page_title,
        page_icon="⚛️",
        layout="wide",
        initial_sidebar_state="collapsed"
    )


@st.cache_resource
def get_api_client() -> FeedAPIClient:
    """Get or create API client instance (cached)."""
    settings = get_settings()
    return FeedAPIClient(
        feed_url=settings.feed_url,
        timeout=settings.feed_request_timeout,
        user_agent=settings.user_agent
    )


def initialize_session_state() -> None:
    """Initialize Streamlit session state variables."""
    if 'controller' not in st.session_state:
        st.session_state.controller = FeedController(get_api_client())


def render_header(controller: FeedController) -> None:
    """Render the title and the filter toggle."""
    title_col, *filter_cols, refresh_col = st.columns([6, 1, 1, 1])

    with title_col:
        st.title(get_settings().page_title)

    for col, mode in zip(filter_cols, FilterMode):
        with col:
            st.button(
                mode.label,
                key=f"filter_{mode.value}",
                type="primary" if controller.state.active_filter is mode else "secondary",
                on_click=controller.select_filter,
                args=(mode,),
                use_container_width=True
            )

    with refresh_col:
        st.button(
            "🔄 Refresh",
            key="refresh",
            on_click=controller.refresh,
            use_container_width=True
        )


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown syntax so text displays literally."""
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)


def render_card(card: PostCard) -> None:
    """Render one post card."""
    with st.container(border=True):
        st.subheader(escape_markdown(card.title))

        if card.body_html:
            st.html(card.body_html)

        score_col, link_col = st.columns(2)
        with score_col:
            st.caption(f"⬆️ {card.score}")
        with link_col:
            if card.external_url:
                st.link_button("👁 View Post", card.external_url)


def render_grid(cards: List[PostCard]) -> None:
    """Render cards in a fixed number of columns."""
    if not cards:
        st.info("No posts to show")
        return

    columns = st.columns(GRID_COLUMNS)
    for index, card in enumerate(cards):
        with columns[index % GRID_COLUMNS]:
            render_card(card)


def render_footer() -> None:
    """Render the author credit."""
    settings = get_settings()
    st.markdown("---")
    st.markdown(f"made by [{settings.author_name}]({settings.author_url})")


def main() -> None:
    """Main feed viewer page."""
    setup_page_config()
    setup_logging()
    initialize_session_state()

    controller: FeedController = st.session_state.controller

    if controller.state.status is FeedStatus.LOADING:
        with st.spinner("Loading posts..."):
            controller.load()

    if controller.state.status is FeedStatus.FAILED:
        st.error(f"Unable to fetch posts: {controller.state.error_message}")
        st.button("🔄 Try again", key="retry", on_click=controller.refresh)
        return

    render_header(controller)

    cards = controller.cards()
    logger.debug(f"Rendering {len(cards)} cards in {controller.state.active_filter.value} order")
    render_grid(cards)
    render_footer()


if __name__ == "__main__":
    main()
