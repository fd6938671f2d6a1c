"""
Core services for the ITTPizen client.
- StateFlow / PreferenceStore: observable state and the session
- Pager: incremental loading of paged endpoints
- IttpizenRepository: async facade over the adapter, DTO -> domain mapping
"""

from .models import Author, Post, PostComment, PostType
from .paging import LoadState, Page, Pager
from .repository import IttpizenRepository, to_post, to_post_comment
from .state import PreferenceStore, StateFlow, Subscription, UserPreference

__all__ = [
    "Author",
    "Post",
    "PostComment",
    "PostType",
    "LoadState",
    "Page",
    "Pager",
    "IttpizenRepository",
    "to_post",
    "to_post_comment",
    "PreferenceStore",
    "StateFlow",
    "Subscription",
    "UserPreference",
]
