"""
Home feed feature: view-model, screen presenter and CLI front end.
"""

from .screen import (
    HomeNavigation,
    HomeScreen,
    HomeScreenModel,
    PagerState,
    SHARE_SUFFIX,
    TABS,
    Tab,
    build_share_text,
    filter_posts_by_type,
)
from .viewmodel import HomeUiState, HomeViewModel

__all__ = [
    "HomeNavigation",
    "HomeScreen",
    "HomeScreenModel",
    "PagerState",
    "SHARE_SUFFIX",
    "TABS",
    "Tab",
    "build_share_text",
    "filter_posts_by_type",
    "HomeUiState",
    "HomeViewModel",
]
