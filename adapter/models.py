"""
Wire models for the ITTPizen REST API.

Request bodies, response payloads and the common envelopes every endpoint
wraps its payload in.
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    type: str = Field(description="Account kind (student, lecturer, alumni, ...)")


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

class LoginResponse(BaseModel):
    access_token: str = Field(description="Bearer token for authorized calls")
    user_id: str
    name: str = ""
    photo: str = ""


class RegisterResponse(BaseModel):
    user_id: str
    name: str = ""
    email: str = ""


class UserResponse(BaseModel):
    """Author reference embedded in posts and comments."""
    id: str
    name: str = ""
    photo: str = ""
    type: str = ""


class PostResponse(BaseModel):
    """
    A single post as returned by the backend.

    Attributes:
        id: Post ID
        user: Author of the post
        text: Post body
        type: Category tag (tweet, academic, achievement, event, scholarship)
        media: Photo URLs attached to the post
        total_like: Like count
        total_comment: Comment count
        liked: Whether the calling user already liked the post
        created_at: Creation timestamp as sent by the server
    """
    id: str
    user: UserResponse
    text: str = ""
    type: str = "tweet"
    media: List[str] = Field(default_factory=list)
    total_like: int = 0
    total_comment: int = 0
    liked: bool = False
    created_at: str = ""


class PostCommentResponse(BaseModel):
    id: str
    post_id: str
    user: UserResponse
    comment: str
    created_at: str = ""


class CreatePostCommentResponse(BaseModel):
    id: str
    post_id: str
    user_id: str
    comment: str
    created_at: str = ""


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

class CommonResponse(BaseModel, Generic[T]):
    """Success envelope around a payload."""
    code: int = 200
    status: str = "OK"
    message: str = ""
    data: T


class PagedCommonResponse(BaseModel, Generic[T]):
    """Success envelope carrying pagination metadata alongside the payload."""
    code: int = 200
    status: str = "OK"
    message: str = ""
    data: T
    page: int = 1
    size: int = 10
    total_data: int = 0
    total_page: Optional[int] = None


class CommonErrorResponse(BaseModel):
    """Error envelope returned by the backend for every rejected call."""
    code: int
    status: str = ""
    message: str = ""
    errors: Optional[Any] = None


__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "LoginResponse",
    "RegisterResponse",
    "UserResponse",
    "PostResponse",
    "PostCommentResponse",
    "CreatePostCommentResponse",
    "CommonResponse",
    "PagedCommonResponse",
    "CommonErrorResponse",
]
