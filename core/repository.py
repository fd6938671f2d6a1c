"""
Repository over the ITTPizen adapter.

Maps wire DTOs to domain models, keeps the session in the PreferenceStore
and runs the blocking HTTP calls off the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from adapter.ittpizen import DEFAULT_PAGE_SIZE, IttpizenAdapter, NetworkResponse
from adapter.models import (
    LoginRequest,
    PagedCommonResponse,
    PostCommentResponse,
    PostResponse,
    RegisterRequest,
    UserResponse,
)
from monitoring import monitor, EventType

from .models import Author, Post, PostComment, PostType
from .paging import Page, Pager
from .state import PreferenceStore, UserPreference

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp '{value}'")
        return None


def _parse_post_type(value: str) -> PostType:
    try:
        return PostType(value.lower())
    except ValueError:
        return PostType.TWEET


def to_author(user: UserResponse) -> Author:
    return Author(id=user.id, name=user.name, photo=user.photo, type=user.type)


def to_post(response: PostResponse) -> Post:
    """Convert a wire post into the domain Post."""
    return Post(
        id=response.id,
        user=to_author(response.user),
        text=response.text,
        type=_parse_post_type(response.type),
        media=list(response.media),
        like_count=response.total_like,
        comment_count=response.total_comment,
        liked=response.liked,
        created_at=_parse_timestamp(response.created_at),
    )


def to_post_comment(response: PostCommentResponse) -> PostComment:
    return PostComment(
        id=response.id,
        post_id=response.post_id,
        user=to_author(response.user),
        comment=response.comment,
        created_at=_parse_timestamp(response.created_at),
    )


def to_page(envelope: PagedCommonResponse) -> Page[Post]:
    return Page(
        items=[to_post(p) for p in envelope.data],
        page=envelope.page,
        size=envelope.size,
        total_data=envelope.total_data,
        total_page=envelope.total_page,
    )


class IttpizenRepository:
    """
    Async entry point the view-models talk to.

    Every method returns the adapter's NetworkResponse, with success bodies
    mapped to domain models where the screen consumes them.
    """

    def __init__(
        self,
        adapter: IttpizenAdapter,
        preferences: PreferenceStore,
        page_size: int = DEFAULT_PAGE_SIZE
    ):
        self.adapter = adapter
        self.preferences = preferences
        self.page_size = page_size

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> NetworkResponse:
        response = await asyncio.to_thread(
            self.adapter.login, LoginRequest(email=email, password=password)
        )
        if response.is_success:
            payload = response.success.data
            self.preferences.save(UserPreference(
                access_token=payload.access_token,
                user_id=payload.user_id,
                name=payload.name,
                photo=payload.photo,
            ))
            monitor.activity.add_event(EventType.LOGIN, user_id=payload.user_id)
        return response

    async def register(self, request: RegisterRequest) -> NetworkResponse:
        return await asyncio.to_thread(self.adapter.register, request)

    def logout(self) -> None:
        user_id = self.preferences.current.user_id
        self.preferences.clear()
        monitor.activity.add_event(EventType.LOGOUT, user_id=user_id)

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def all_post_pager(
        self,
        token: str,
        type: Optional[PostType] = None,
        page_size: Optional[int] = None
    ) -> Pager[Post]:
        """Pager over GET post; `type` is forwarded only when given."""
        type_value = type.value if type else None

        async def fetch(page: int, size: int) -> NetworkResponse:
            response = await asyncio.to_thread(
                self.adapter.get_all_post, token, type_value, page, size
            )
            return response.map(to_page)

        return Pager(fetch, page_size=page_size or self.page_size)

    async def get_post_by_user(self, token: str, user_id: str) -> NetworkResponse:
        response = await asyncio.to_thread(self.adapter.get_post_by_user, token, user_id)
        return response.map(lambda envelope: [to_post(p) for p in envelope.data])

    async def get_post_by_id(self, token: str, post_id: str) -> NetworkResponse:
        response = await asyncio.to_thread(self.adapter.get_post_by_id, token, post_id)
        return response.map(lambda envelope: to_post(envelope.data))

    # -------------------------------------------------------------------------
    # Comments and likes
    # -------------------------------------------------------------------------

    async def get_post_comment(self, token: str, post_id: str) -> NetworkResponse:
        response = await asyncio.to_thread(self.adapter.get_post_comment, token, post_id)
        return response.map(lambda envelope: [to_post_comment(c) for c in envelope.data])

    async def create_post_comment(self, token: str, post_id: str, comment: str) -> NetworkResponse:
        response = await asyncio.to_thread(self.adapter.create_post_comment, token, post_id, comment)
        if response.is_success:
            monitor.activity.add_event(EventType.COMMENT_CREATED, post_id=post_id)
        return response

    async def create_post_like(self, token: str, post_id: str) -> NetworkResponse:
        response = await asyncio.to_thread(self.adapter.create_post_like, token, post_id)
        if response.is_success:
            monitor.activity.add_event(EventType.POST_LIKED, post_id=post_id)
        return response

    async def delete_post_like(self, token: str, post_id: str) -> NetworkResponse:
        response = await asyncio.to_thread(self.adapter.delete_post_like, token, post_id)
        if response.is_success:
            monitor.activity.add_event(EventType.POST_UNLIKED, post_id=post_id)
        return response


__all__ = [
    "IttpizenRepository",
    "to_post",
    "to_post_comment",
    "to_page",
    "to_author",
]
