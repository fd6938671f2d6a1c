"""
Home feed screen.

A headless presenter: it owns the tab/pager selection, decides when the
feed is loaded and turns gestures into view-model calls. Rendering is a
snapshot (HomeScreenModel) that any front end can draw.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Coroutine, Iterable, List, Optional, Set

from core import LoadState, Post, PostType, StateFlow, Subscription, UserPreference
from core.mocks import generate_all_post

from .viewmodel import HomeUiState, HomeViewModel

logger = logging.getLogger(__name__)

SHARE_SUFFIX = "By ITTPizen"


@dataclass(frozen=True)
class Tab:
    title: str
    type: Optional[PostType] = None


TABS: List[Tab] = [
    Tab("All Post"),
    Tab("Tweet", PostType.TWEET),
    Tab("Academic", PostType.ACADEMIC),
    Tab("#PrestasiITTP", PostType.ACHIEVEMENT),
    Tab("Events", PostType.EVENT),
    Tab("Scholarship", PostType.SCHOLARSHIP),
]


def filter_posts_by_type(posts: Iterable[Post], type: Optional[PostType]) -> List[Post]:
    """Posts tagged with `type`; every post when `type` is None."""
    if type is None:
        return list(posts)
    return [post for post in posts if post.type == type]


def build_share_text(post: Post) -> str:
    return f"{post.text}\n\n{SHARE_SUFFIX}"


class PagerState:
    """Current page of the swipeable tab pager."""

    def __init__(self, page_count: int, initial_page: int = 0):
        self.page_count = page_count
        self.current_page: StateFlow[int] = StateFlow(self._clamp(initial_page))

    def _clamp(self, page: int) -> int:
        return max(0, min(self.page_count - 1, page))

    def scroll_to_page(self, page: int) -> None:
        self.current_page.set(self._clamp(page))


@dataclass(frozen=True)
class HomeScreenModel:
    """Everything needed to draw the screen once."""
    profile_photo: str
    tabs: List[str]
    selected_tab_index: int
    posts: List[Post]
    load_state: LoadState
    end_reached: bool
    showing_placeholder: bool
    message: Optional[str] = None


def _noop(*_args) -> None:
    return None


@dataclass
class HomeNavigation:
    """Navigation callbacks; each receives the id or URL of its target."""
    to_my_profile: Callable[[str], None] = _noop
    to_user_profile: Callable[[str], None] = _noop
    to_notification: Callable[[str], None] = _noop
    to_detail_post: Callable[[str], None] = _noop
    to_photo_detail: Callable[[str], None] = _noop


class HomeScreen:
    """
    Presenter for the tabbed home feed.

    Usage:
        screen = HomeScreen(view_model, share=print)
        await screen.mount()
        await screen.wait_idle()     # first feed page, once logged in
        model = screen.render()
        await screen.unmount()
    """

    def __init__(
        self,
        view_model: HomeViewModel,
        share: Callable[[str], None] = _noop,
        navigation: Optional[HomeNavigation] = None,
        tabs: Optional[List[Tab]] = None,
    ):
        self.view_model = view_model
        self.share = share
        self.navigation = navigation or HomeNavigation()
        self.tabs = tabs or TABS
        self.pager_state = PagerState(len(self.tabs))

        self.placeholder_items: List[Post] = []
        self.user_preference = UserPreference()
        self.ui_state = HomeUiState()

        self._seeded = False
        self._mounted = False
        self._pending_token: Optional[str] = None
        self._initial_load: Optional[asyncio.Task] = None
        self._subscriptions: List[Subscription] = []
        self._tasks: Set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> None:
        """Start observing state; must run inside the event loop."""
        if self._mounted:
            return
        self._mounted = True

        if not self._seeded:
            self.placeholder_items.extend(generate_all_post())
            self._seeded = True

        self._subscriptions.append(self.view_model.ui_state.subscribe(self._on_ui_state))
        self._subscriptions.append(self.view_model.user_preference.subscribe(self._on_user_preference))
        logger.debug("Home screen mounted")

    async def unmount(self) -> None:
        """Stop observing state and cancel everything still running."""
        if not self._mounted:
            return
        self._mounted = False

        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._pending_token = None
        self._initial_load = None
        logger.debug(f"Home screen unmounted, cancelled {len(tasks)} task(s)")

    async def wait_idle(self) -> None:
        """Wait until every launched task finished, including ones they launch."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def _launch(self, coro: Coroutine) -> asyncio.Task:
        if not self._mounted:
            coro.close()
            raise RuntimeError("HomeScreen is not mounted")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Home screen task failed: {task.exception()}")

    # -------------------------------------------------------------------------
    # State observation
    # -------------------------------------------------------------------------

    def _on_ui_state(self, state: HomeUiState) -> None:
        self.ui_state = state

    def _on_user_preference(self, preference: UserPreference) -> None:
        self.user_preference = preference
        self._load_initial_feed(preference)

    def _load_initial_feed(self, preference: UserPreference) -> Optional[asyncio.Task]:
        """First feed page, at most once per session token."""
        token = preference.access_token
        if not token:
            self._end_session()
            return None

        state = self.view_model.ui_state.value
        if state.all_post_loaded and state.loaded_token == token:
            return None
        if self._pending_token == token:
            return None

        self._pending_token = token
        self._initial_load = self._launch(self._get_all_post(token))
        return self._initial_load

    def _end_session(self) -> None:
        """Drop the feed and any first-page load of the previous session."""
        if self._initial_load is not None and not self._initial_load.done():
            self._initial_load.cancel()
        self._initial_load = None
        self._pending_token = None
        if self.view_model.ui_state.value.all_post is not None:
            logger.info("Session ended, dropping feed")
            self.view_model.clear()

    async def _get_all_post(self, token: str) -> None:
        try:
            await self.view_model.get_all_post(token=token)
        finally:
            if self._pending_token == token:
                self._pending_token = None

    # -------------------------------------------------------------------------
    # Tabs
    # -------------------------------------------------------------------------

    @property
    def selected_tab_index(self) -> int:
        return self.pager_state.current_page.value

    @property
    def selected_tab(self) -> Tab:
        return self.tabs[self.selected_tab_index]

    def on_tab_selected(self, index: int) -> None:
        """Tab row click: scroll the pager to the tab."""
        if not 0 <= index < len(self.tabs):
            raise ValueError(f"No tab at index {index}")
        self.pager_state.scroll_to_page(index)

    def on_page_changed(self, page: int) -> None:
        """Pager swipe settled on `page`: the tab row follows."""
        self.pager_state.scroll_to_page(page)

    # -------------------------------------------------------------------------
    # Feed content
    # -------------------------------------------------------------------------

    @property
    def showing_placeholder(self) -> bool:
        pager = self.ui_state.all_post
        if pager is None or not self.ui_state.all_post_loaded:
            return True
        return pager.item_count == 0 and not pager.end_reached

    @property
    def feed_items(self) -> List[Post]:
        """Live feed once a page arrived, placeholder posts until then."""
        if self.showing_placeholder:
            return list(self.placeholder_items)
        return self.ui_state.all_post.items

    def posts_for_page(self, page: int) -> List[Post]:
        return filter_posts_by_type(self.feed_items, self.tabs[page].type)

    def on_load_more(self) -> asyncio.Task:
        return self._launch(self.view_model.load_more_post())

    def on_refresh(self) -> asyncio.Task:
        return self._launch(self.view_model.refresh_all_post())

    # -------------------------------------------------------------------------
    # Post actions
    # -------------------------------------------------------------------------

    def on_like_clicked(self, post: Post) -> asyncio.Task:
        """Like or unlike depending on the post's current state, then reload the feed."""
        return self._launch(self._toggle_like(post))

    async def _toggle_like(self, post: Post) -> None:
        token = self.user_preference.access_token
        if post.liked:
            await self.view_model.delete_post_like(token=token, post_id=post.id)
        else:
            await self.view_model.create_post_like(token=token, post_id=post.id)
        await self.view_model.refresh_all_post()

    def on_share_clicked(self, post: Post) -> None:
        self.share(build_share_text(post))

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def on_profile_click(self) -> None:
        self.navigation.to_my_profile(self.user_preference.user_id)

    def on_notification_click(self) -> None:
        self.navigation.to_notification(self.user_preference.user_id)

    def on_author_click(self, post: Post) -> None:
        self.navigation.to_user_profile(post.user.id)

    def on_post_click(self, post: Post) -> None:
        self.navigation.to_detail_post(post.id)

    def on_comment_click(self, post: Post) -> None:
        self.navigation.to_detail_post(post.id)

    def on_photo_click(self, url: str) -> None:
        self.navigation.to_photo_detail(url)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> HomeScreenModel:
        pager = self.ui_state.all_post
        return HomeScreenModel(
            profile_photo=self.user_preference.photo,
            tabs=[tab.title for tab in self.tabs],
            selected_tab_index=self.selected_tab_index,
            posts=self.posts_for_page(self.selected_tab_index),
            load_state=pager.load_state if pager else LoadState.NOT_LOADING,
            end_reached=pager.end_reached if pager else False,
            showing_placeholder=self.showing_placeholder,
            message=self.ui_state.message,
        )


__all__ = [
    "HomeScreen",
    "HomeScreenModel",
    "HomeNavigation",
    "PagerState",
    "Tab",
    "TABS",
    "SHARE_SUFFIX",
    "filter_posts_by_type",
    "build_share_text",
]
