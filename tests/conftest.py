"""
Shared fixtures: wire payloads and a mocked adapter.
"""

from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from adapter.ittpizen import IttpizenAdapter, Success
from adapter.models import CommonResponse, PagedCommonResponse, PostResponse
from core import IttpizenRepository, PreferenceStore, UserPreference


def make_post_payload(post_id: str = "p1", post_type: str = "tweet", liked: bool = False, **overrides) -> Dict[str, Any]:
    payload = {
        "id": post_id,
        "user": {"id": "u1", "name": "Ayu", "photo": "https://cdn.example/ayu.png", "type": "student"},
        "text": f"Post {post_id}",
        "type": post_type,
        "media": [],
        "total_like": 3,
        "total_comment": 1,
        "liked": liked,
        "created_at": "2024-06-15T12:00:00Z",
    }
    payload.update(overrides)
    return payload


def make_paged_payload(posts: List[Dict[str, Any]], page: int = 1, size: int = 10, total_page: int = 1) -> Dict[str, Any]:
    return {
        "code": 200,
        "status": "OK",
        "message": "",
        "data": posts,
        "page": page,
        "size": size,
        "total_data": len(posts),
        "total_page": total_page,
    }


def make_paged_success(posts: List[Dict[str, Any]], page: int = 1, size: int = 10, total_page: int = 1) -> Success:
    """What IttpizenAdapter.get_all_post returns for a 200 response."""
    body = PagedCommonResponse[List[PostResponse]].model_validate(
        make_paged_payload(posts, page=page, size=size, total_page=total_page)
    )
    return Success(body=body)


def make_ack_success(message: str = "OK") -> Success:
    return Success(body=CommonResponse[str](data=message))


@pytest.fixture
def post_payload():
    return make_post_payload


@pytest.fixture
def paged_success():
    return make_paged_success


@pytest.fixture
def mock_adapter():
    """Adapter double whose feed returns a single one-page response."""
    adapter = Mock(spec=IttpizenAdapter)
    adapter.base_url = "https://api.test"
    adapter.get_all_post = Mock(return_value=make_paged_success([
        make_post_payload("p1", "tweet"),
        make_post_payload("p2", "academic", liked=True),
    ]))
    adapter.create_post_like = Mock(return_value=make_ack_success("liked"))
    adapter.delete_post_like = Mock(return_value=make_ack_success("unliked"))
    return adapter


@pytest.fixture
def preferences():
    return PreferenceStore()


@pytest.fixture
def repository(mock_adapter, preferences):
    return IttpizenRepository(mock_adapter, preferences)


@pytest.fixture
def logged_in(preferences):
    """Store a session for user u1 with token 'abc'."""
    preference = UserPreference(access_token="abc", user_id="u1", name="Ayu", photo="https://cdn.example/ayu.png")
    preferences.save(preference)
    return preference
