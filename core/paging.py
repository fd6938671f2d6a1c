"""
Incremental page loading for paged list endpoints.

The Pager keeps the items loaded so far and the cursor of the next page.
It lives as long as the view-model that owns it; nothing is cached beyond it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from adapter.ittpizen import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, NetworkResponse
from monitoring import monitor, EventType

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadState(str, Enum):
    NOT_LOADING = "not_loading"
    LOADING = "loading"
    ERROR = "error"


@dataclass
class Page(Generic[T]):
    """One page of items plus the server's pagination metadata."""
    items: List[T]
    page: int
    size: int
    total_data: int = 0
    total_page: Optional[int] = None

    @property
    def is_last(self) -> bool:
        if self.total_page is not None:
            return self.page >= self.total_page
        return len(self.items) < self.size


PageFetcher = Callable[[int, int], Awaitable[NetworkResponse]]


class Pager(Generic[T]):
    """
    Loads a paged endpoint page by page.

    Usage:
        pager = Pager(fetch)        # fetch(page, size) -> NetworkResponse[Page]
        await pager.refresh()       # first page
        await pager.load_next()     # appends the next page
        for item in pager.items: ...
    """

    def __init__(
        self,
        fetch: PageFetcher,
        page_size: int = DEFAULT_PAGE_SIZE,
        initial_page: int = DEFAULT_PAGE
    ):
        self._fetch = fetch
        self.page_size = page_size
        self.initial_page = initial_page

        self._items: List[T] = []
        self._next_page: int = initial_page
        self.end_reached = False
        self.load_state = LoadState.NOT_LOADING
        self.last_error: Optional[NetworkResponse] = None
        self.generation = 0
        self._listeners: List[Callable[["Pager[T]"], None]] = []

    @property
    def items(self) -> List[T]:
        return list(self._items)

    @property
    def item_count(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def add_listener(self, listener: Callable[["Pager[T]"], None]) -> None:
        """Called after every load attempt, successful or not."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[["Pager[T]"], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def refresh(self) -> NetworkResponse:
        """
        Fetch the initial page again.

        Items loaded so far stay visible until the new first page arrives,
        then they are replaced by it.
        """
        self.last_error = None
        self.generation += 1
        # A refresh supersedes any load in flight
        self.load_state = LoadState.NOT_LOADING
        return await self._load(self.initial_page, self.generation)

    async def load_next(self) -> Optional[NetworkResponse]:
        """Fetch the next page; returns None when there is nothing to do."""
        if self.load_state == LoadState.LOADING or self.end_reached:
            return None
        return await self._load(self._next_page, self.generation)

    async def _load(self, page: int, generation: int) -> NetworkResponse:
        self.load_state = LoadState.LOADING
        try:
            response = await self._fetch(page, self.page_size)
        except asyncio.CancelledError:
            if generation == self.generation:
                self.load_state = LoadState.NOT_LOADING
            logger.debug(f"Load of page {page} cancelled")
            raise

        if generation != self.generation:
            # Result of a load a refresh already replaced
            logger.debug(f"Discarding stale page {page}")
            return response

        if response.is_success:
            result: Page[T] = response.success
            if page == self.initial_page:
                self._items = list(result.items)
            else:
                self._items.extend(result.items)
            self._next_page = page + 1
            self.end_reached = result.is_last
            self.load_state = LoadState.NOT_LOADING
            self.last_error = None
            logger.info(f"Loaded page {page}: {len(result.items)} items (total loaded {len(self._items)})")
            monitor.activity.add_event(
                EventType.PAGE_LOADED,
                page=page,
                items=len(result.items),
                end_reached=self.end_reached
            )
        else:
            self.load_state = LoadState.ERROR
            self.last_error = response
            if page == self.initial_page:
                # Next load_next retries the first page
                self._next_page = self.initial_page
                self.end_reached = False
            logger.warning(f"Failed to load page {page}: {type(response).__name__}")

        for listener in list(self._listeners):
            listener(self)
        return response


__all__ = ["Pager", "Page", "LoadState", "PageFetcher"]
