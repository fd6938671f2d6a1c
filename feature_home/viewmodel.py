"""
View-model behind the home feed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Optional

from adapter.ittpizen import NetworkResponse, error_message
from core import IttpizenRepository, Pager, PostType, StateFlow, UserPreference
from monitoring import monitor, EventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HomeUiState:
    """
    Attributes:
        all_post: Pager over the server feed, None until the first load
        all_post_loaded: Whether the initial load was started for loaded_token
        loaded_token: Session token the feed was loaded with
        message: User-facing message from the last failed call
        revision: Bumped whenever the pager content changes
    """
    all_post: Optional[Pager] = None
    all_post_loaded: bool = False
    loaded_token: str = ""
    message: Optional[str] = None
    revision: int = 0


class HomeViewModel:
    """
    Holds the feed pager and forwards user actions to the repository.

    Usage:
        view_model = HomeViewModel(repository)
        await view_model.get_all_post(token)
        view_model.ui_state.value.all_post.items
    """

    def __init__(self, repository: IttpizenRepository):
        self.repository = repository
        self.user_preference: StateFlow[UserPreference] = repository.preferences.preference
        self.ui_state: StateFlow[HomeUiState] = StateFlow(HomeUiState())

    def _on_pager_changed(self, pager: Pager) -> None:
        state = self.ui_state.value
        if state.all_post is not pager:
            return
        message = error_message(pager.last_error) if pager.last_error else state.message
        self.ui_state.set(replace(state, revision=state.revision + 1, message=message))

    async def get_all_post(self, token: str, type: Optional[PostType] = None) -> NetworkResponse:
        """Create the feed pager for this session and load its first page."""
        pager = self.repository.all_post_pager(token, type=type)
        pager.add_listener(self._on_pager_changed)
        self.ui_state.update(lambda s: replace(
            s, all_post=pager, all_post_loaded=True, loaded_token=token, message=None
        ))

        try:
            response = await pager.refresh()
        except asyncio.CancelledError:
            # Let the next mount start over
            pager.remove_listener(self._on_pager_changed)
            self.ui_state.update(lambda s: replace(
                s, all_post=None, all_post_loaded=False, loaded_token=""
            ) if s.all_post is pager else s)
            raise

        if response.is_success:
            monitor.activity.add_event(EventType.FEED_LOADED, items=pager.item_count)
        else:
            logger.warning(f"Initial feed load failed: {error_message(response)}")
        return response

    def clear(self) -> None:
        """Forget the feed of the previous session."""
        pager = self.ui_state.value.all_post
        if pager is not None:
            pager.remove_listener(self._on_pager_changed)
        self.ui_state.set(HomeUiState())

    async def refresh_all_post(self) -> Optional[NetworkResponse]:
        pager = self.ui_state.value.all_post
        if pager is None:
            return None
        return await pager.refresh()

    async def load_more_post(self) -> Optional[NetworkResponse]:
        pager = self.ui_state.value.all_post
        if pager is None:
            return None
        return await pager.load_next()

    def _report(self, response: NetworkResponse) -> NetworkResponse:
        if not response.is_success:
            self.ui_state.update(lambda s: replace(s, message=error_message(response)))
        return response

    async def create_post_like(self, token: str, post_id: str) -> NetworkResponse:
        return self._report(await self.repository.create_post_like(token, post_id))

    async def delete_post_like(self, token: str, post_id: str) -> NetworkResponse:
        return self._report(await self.repository.delete_post_like(token, post_id))

    async def create_post_comment(self, token: str, post_id: str, comment: str) -> NetworkResponse:
        return self._report(await self.repository.create_post_comment(token, post_id, comment))

    def consume_message(self) -> Optional[str]:
        message = self.ui_state.value.message
        if message is not None:
            self.ui_state.update(lambda s: replace(s, message=None))
        return message


__all__ = ["HomeViewModel", "HomeUiState"]
