"""
Unit tests for the Pager.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock

from adapter.ittpizen import NetworkError, ServerError, Success
from adapter.models import CommonErrorResponse
from core import LoadState, Page, Pager


def page_response(page, items, size=2, total_page=None):
    return Success(body=Page(items=items, page=page, size=size, total_page=total_page))


class TestPage:

    def test_last_by_total_page(self):
        assert Page(items=[1, 2], page=3, size=2, total_page=3).is_last is True
        assert Page(items=[1, 2], page=2, size=2, total_page=3).is_last is False

    def test_last_by_short_page(self):
        assert Page(items=[1], page=1, size=2).is_last is True
        assert Page(items=[1, 2], page=1, size=2).is_last is False


class TestPager:

    @pytest.mark.asyncio
    async def test_refresh_loads_initial_page(self):
        fetch = AsyncMock(return_value=page_response(1, ["a", "b"], total_page=2))
        pager = Pager(fetch, page_size=2)

        await pager.refresh()

        fetch.assert_awaited_once_with(1, 2)
        assert pager.items == ["a", "b"]
        assert pager.item_count == 2
        assert pager[1] == "b"
        assert pager.end_reached is False
        assert pager.load_state == LoadState.NOT_LOADING

    @pytest.mark.asyncio
    async def test_load_next_appends_until_end(self):
        fetch = AsyncMock(side_effect=[
            page_response(1, ["a", "b"], total_page=2),
            page_response(2, ["c"], total_page=2),
        ])
        pager = Pager(fetch, page_size=2)

        await pager.refresh()
        await pager.load_next()
        extra = await pager.load_next()

        assert pager.items == ["a", "b", "c"]
        assert pager.end_reached is True
        assert extra is None
        assert fetch.await_count == 2
        assert fetch.await_args_list[1].args == (2, 2)

    @pytest.mark.asyncio
    async def test_refresh_starts_over(self):
        fetch = AsyncMock(side_effect=[
            page_response(1, ["a", "b"]),
            page_response(2, ["c", "d"]),
            page_response(1, ["z", "b"]),
        ])
        pager = Pager(fetch, page_size=2)

        await pager.refresh()
        await pager.load_next()
        await pager.refresh()

        assert pager.items == ["z", "b"]
        assert fetch.await_args_list[2].args == (1, 2)

    @pytest.mark.asyncio
    async def test_error_is_kept_and_not_retried(self):
        error = ServerError(body=CommonErrorResponse(code=401, message="Invalid token"), status_code=401)
        fetch = AsyncMock(return_value=error)
        pager = Pager(fetch)

        response = await pager.refresh()

        assert response is error
        assert pager.load_state == LoadState.ERROR
        assert pager.last_error is error
        assert pager.items == []
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_load_next_after_error_retries_same_page(self):
        fetch = AsyncMock(side_effect=[
            page_response(1, ["a", "b"]),
            NetworkError(OSError("offline")),
            page_response(2, ["c"]),
        ])
        pager = Pager(fetch, page_size=2)

        await pager.refresh()
        await pager.load_next()
        await pager.load_next()

        assert [call.args[0] for call in fetch.await_args_list] == [1, 2, 2]
        assert pager.items == ["a", "b", "c"]
        assert pager.last_error is None

    @pytest.mark.asyncio
    async def test_concurrent_load_next_is_serialized(self):
        release = asyncio.Event()

        async def slow_fetch(page, size):
            await release.wait()
            return page_response(page, ["x", "y"])

        pager = Pager(slow_fetch, page_size=2)
        first = asyncio.create_task(pager.load_next())
        await asyncio.sleep(0)

        second = await pager.load_next()
        release.set()
        await first

        assert second is None
        assert pager.items == ["x", "y"]

    @pytest.mark.asyncio
    async def test_stale_page_is_discarded_after_refresh(self):
        release = asyncio.Event()
        calls = []

        async def fetch(page, size):
            calls.append(page)
            if len(calls) == 1:
                await release.wait()
                return page_response(page, ["stale", "stale"])
            return page_response(page, ["fresh"])

        pager = Pager(fetch, page_size=2)
        old = asyncio.create_task(pager.load_next())
        await asyncio.sleep(0)

        await pager.refresh()
        release.set()
        await old

        assert pager.items == ["fresh"]

    @pytest.mark.asyncio
    async def test_listeners_called_after_each_load(self):
        fetch = AsyncMock(return_value=page_response(1, ["a"]))
        pager = Pager(fetch, page_size=2)
        listener = Mock()
        pager.add_listener(listener)

        await pager.refresh()
        pager.remove_listener(listener)
        await pager.refresh()

        listener.assert_called_once_with(pager)

    @pytest.mark.asyncio
    async def test_cancelled_load_can_be_retried(self):
        started = asyncio.Event()
        calls = []

        async def fetch(page, size):
            calls.append(page)
            if len(calls) == 2:
                started.set()
                await asyncio.Event().wait()
            return page_response(page, ["a", "b"] if page == 1 else ["c", "d"], total_page=3)

        pager = Pager(fetch, page_size=2)
        await pager.refresh()
        task = asyncio.create_task(pager.load_next())
        await started.wait()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

        assert pager.load_state == LoadState.NOT_LOADING
        response = await pager.load_next()
        assert response is not None
        assert calls == [1, 2, 2]
        assert pager.items == ["a", "b", "c", "d"]

    @pytest.mark.asyncio
    async def test_refresh_keeps_items_until_first_page_arrives(self):
        release = asyncio.Event()
        pages = [["a", "b"], ["z"]]

        async def fetch(page, size):
            items = pages.pop(0)
            if not pages:
                await release.wait()
            return page_response(page, items)

        pager = Pager(fetch, page_size=2)
        await pager.refresh()
        task = asyncio.create_task(pager.refresh())
        await asyncio.sleep(0)

        assert pager.load_state == LoadState.LOADING
        assert pager.items == ["a", "b"]

        release.set()
        await task
        assert pager.items == ["z"]

    @pytest.mark.asyncio
    async def test_cancelled_refresh_keeps_previous_items(self):
        started = asyncio.Event()
        calls = []

        async def fetch(page, size):
            calls.append(page)
            if len(calls) == 2:
                started.set()
                await asyncio.Event().wait()
            return page_response(page, ["a", "b"], total_page=2)

        pager = Pager(fetch, page_size=2)
        await pager.refresh()
        task = asyncio.create_task(pager.refresh())
        await started.wait()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

        assert pager.items == ["a", "b"]
        assert pager.load_state == LoadState.NOT_LOADING
        await pager.load_next()
        assert calls[-1] == 2

    @pytest.mark.asyncio
    async def test_failed_refresh_retries_first_page(self):
        fetch = AsyncMock(side_effect=[
            page_response(1, ["a", "b"], total_page=2),
            page_response(2, ["c"], total_page=2),
            NetworkError(OSError("offline")),
            page_response(1, ["z"], total_page=1),
        ])
        pager = Pager(fetch, page_size=2)

        await pager.refresh()
        await pager.load_next()
        await pager.refresh()

        assert pager.load_state == LoadState.ERROR
        assert pager.items == ["a", "b", "c"]
        assert pager.end_reached is False

        await pager.load_next()
        assert fetch.await_args_list[3].args == (1, 2)
        assert pager.items == ["z"]
        assert pager.end_reached is True
