"""Tests for fetcher outcome normalisation."""

import asyncio

import pytest
from conftest import NetworkError

from infinitylist.core.fetcher import never_fetch, resolve_outcome
from infinitylist.core.pagination import Failure, Page, Success
from infinitylist.errors import FetchError


class TestResolveOutcome:
    """Tests for resolve_outcome."""

    async def test_page_becomes_success(self):
        """Test that a returned page becomes a Success."""
        page = Page[int](items=[1, 2])

        async def fetch(page_index: int):
            return page

        outcome = await resolve_outcome(fetch, 0)
        assert isinstance(outcome, Success)
        assert outcome.page is page

    async def test_page_index_passed_through(self):
        """Test that the page index reaches the fetcher."""
        received = []

        async def fetch(page_index: int):
            received.append(page_index)
            return Page[int](items=[])

        await resolve_outcome(fetch, 7)
        assert received == [7]

    async def test_exception_becomes_failure(self):
        """Test that a raised exception becomes a Failure."""
        error = NetworkError("timeout")

        async def fetch(page_index: int):
            raise error

        outcome = await resolve_outcome(fetch, 0)
        assert isinstance(outcome, Failure)
        assert outcome.error is error

    async def test_fetch_error_keeps_page_index(self):
        """Test that FetchError carries the failed page index."""
        async def fetch(page_index: int):
            raise FetchError("server returned 503", page_index=page_index)

        outcome = await resolve_outcome(fetch, 3)
        assert isinstance(outcome, Failure)
        assert outcome.error.page_index == 3
        assert str(outcome.error) == "server returned 503"

    async def test_outcome_returned_as_is(self):
        """Test that fetchers may build the outcome themselves."""
        failure = Failure(NetworkError("offline"))

        async def fetch(page_index: int):
            return failure

        assert await resolve_outcome(fetch, 0) is failure

    async def test_unexpected_result_is_failure(self):
        """Test that a result that is not a page becomes a TypeError failure."""
        async def fetch(page_index: int):
            return [1, 2, 3]

        outcome = await resolve_outcome(fetch, 0)
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, TypeError)

    async def test_cancellation_propagates(self):
        """Test that cancelling a fetch is not reported as a failure."""
        task = asyncio.create_task(resolve_outcome(never_fetch, 0))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestNeverFetch:
    """Tests for the default fetcher."""

    async def test_never_resolves(self):
        """Test that the default fetcher never returns."""
        with pytest.raises(TimeoutError):
            await asyncio.wait_for(never_fetch(0), timeout=0.05)
