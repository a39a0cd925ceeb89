"""Shared pytest fixtures."""

import asyncio

import pytest

from infinitylist.core.pagination import Item, Page


class Post(Item):
    """Item model used across tests."""

    title: str


class NetworkError(Exception):
    """Fetch failure used by tests."""


class ScriptedFetcher:
    """Fetcher that replays a fixed list of results.

    Each result is either a Page (returned) or an exception (raised).
    When ``gate`` is set, every call waits for it before resolving.
    """

    def __init__(self, results, gate: asyncio.Event | None = None):
        self._results = list(results)
        self.gate = gate
        self.calls: list[int] = []

    async def __call__(self, page_index: int):
        self.calls.append(page_index)
        if self.gate is not None:
            await self.gate.wait()
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def posts():
    """Three distinct posts."""
    return [Post(title="first"), Post(title="second"), Post(title="third")]


@pytest.fixture
def two_pages():
    """Fetcher returning [1, 2, 3] then [4, 5]."""
    return ScriptedFetcher([Page[int](items=[1, 2, 3]), Page[int](items=[4, 5])])


@pytest.fixture
def failing_fetcher():
    """Fetcher whose first call fails with NetworkError."""
    return ScriptedFetcher([NetworkError("connection reset")])
