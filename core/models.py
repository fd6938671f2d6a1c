"""
Domain models shown by the feed.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PostType(str, Enum):
    """Category tag of a post, also the feed tab it belongs to."""
    TWEET = "tweet"
    ACADEMIC = "academic"
    ACHIEVEMENT = "achievement"
    EVENT = "event"
    SCHOLARSHIP = "scholarship"


class Author(BaseModel):
    id: str
    name: str = ""
    photo: str = ""
    type: str = ""


class Post(BaseModel):
    """
    A post as the feed renders it.

    Attributes:
        id: Post ID
        user: Author
        text: Post body
        type: Category tag used by the feed tabs
        media: Attached photo URLs
        like_count: Number of likes
        comment_count: Number of comments
        liked: Whether the session user liked this post
        created_at: Creation time, None when the server sent none
    """
    id: str
    user: Author
    text: str = ""
    type: PostType = PostType.TWEET
    media: List[str] = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0
    liked: bool = False
    created_at: Optional[datetime] = None


class PostComment(BaseModel):
    id: str
    post_id: str
    user: Author
    comment: str
    created_at: Optional[datetime] = None


__all__ = ["PostType", "Author", "Post", "PostComment"]
