from __future__ import annotations

import asyncio
from collections.abc import Callable, Hashable, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from infinitylist.core.fetcher import PageFetcher, never_fetch, resolve_outcome
from infinitylist.core.observable import ItemsListener, ObservableList
from infinitylist.core.pagination import Failure, FetchOutcome, Page, Success
from infinitylist.errors import ValidationError
from infinitylist.logging import setup_logging

if TYPE_CHECKING:
    from infinitylist.config import Config

logger = structlog.get_logger(__name__)


class ConcurrencyPolicy(StrEnum):
    """What ``load_more()`` does while a previous fetch is still pending.

    - IGNORE: the call is dropped
    - ALLOW: another fetch starts; overlapping pages may be appended twice
    """

    IGNORE = "ignore"
    ALLOW = "allow"


class PaginationController[E]:
    """Accumulates pages of items and decides when the next page is needed.

    The presentation layer reads ``items``, subscribes to changes, asks
    ``should_load_more(item)`` for every rendered item and calls
    ``load_more()`` when it returns True. Results are reported through
    ``on_success`` / ``on_error``, exactly one of them per fetch.
    """

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        *,
        initial_page: int = 0,
        on_success: Callable[[Page[E]], Any] | None = None,
        on_error: Callable[[Exception], Any] | None = None,
        key: Callable[[E], Hashable] | None = None,
        concurrency: ConcurrencyPolicy = ConcurrencyPolicy.IGNORE,
    ) -> None:
        if initial_page < 0:
            raise ValidationError(f"Initial page must be non-negative, got {initial_page}")

        self._fetcher = fetcher
        self._page_index = initial_page
        self._items: ObservableList[E] = ObservableList()
        self._on_success = on_success
        self._on_error = on_error
        self._key = key
        self._concurrency = ConcurrencyPolicy(concurrency)
        self._last_page: Page[E] | None = None
        self._pending = 0  # load_next() calls awaiting their fetch
        self._fetching: set[asyncio.Task[FetchOutcome[E]]] = set()  # load_more() tasks awaiting their fetch
        self._tasks: set[asyncio.Task[FetchOutcome[E]]] = set()

    @classmethod
    def from_config(
        cls,
        config: Config,
        fetcher: PageFetcher | None = None,
        *,
        on_success: Callable[[Page[E]], Any] | None = None,
        on_error: Callable[[Exception], Any] | None = None,
        key: Callable[[E], Hashable] | None = None,
    ) -> PaginationController[E]:
        """Create a controller from config and set up logging to match it."""
        setup_logging(config)
        return cls(
            fetcher,
            initial_page=config.initial_page,
            on_success=on_success,
            on_error=on_error,
            key=key,
            concurrency=config.concurrency,
        )

    @property
    def items(self) -> Sequence[E]:
        """Live read-only view of all loaded items, in display order."""
        return self._items

    @property
    def page_index(self) -> int:
        """Index of the next page to fetch."""
        return self._page_index

    @property
    def is_loading(self) -> bool:
        return bool(self._pending or self._fetching)

    @property
    def has_more(self) -> bool:
        """False once the latest loaded page reported that nothing follows it."""
        if self._last_page is None:
            return True
        return bool(getattr(self._last_page, "has_more", True))

    def subscribe(self, listener: ItemsListener[E]) -> None:
        """Get notified after every page appended to ``items``."""
        self._items.subscribe(listener)

    def unsubscribe(self, listener: ItemsListener[E]) -> bool:
        return self._items.unsubscribe(listener)

    def should_load_more(self, candidate: E) -> bool:
        """Check whether ``candidate`` is the last loaded item."""
        if not self._items:
            return False
        last = self._items[-1]
        if self._key is not None:
            return self._key(candidate) == self._key(last)
        return bool(candidate == last)

    async def fetch_page(self, page_index: int) -> Page[E] | FetchOutcome[E]:
        """Load one page. Override in subclasses instead of passing a fetcher."""
        fetcher = self._fetcher if self._fetcher is not None else never_fetch
        return await fetcher(page_index)

    def load_more(self) -> asyncio.Task[FetchOutcome[E]] | None:
        """Start fetching the next page in the background.

        Must be called with a running event loop. Returns the task, or None
        when the call was dropped because a fetch is already pending.
        """
        if self.is_loading and self._concurrency is ConcurrencyPolicy.IGNORE:
            logger.debug("load_more_ignored", page_index=self._page_index)
            return None

        task = asyncio.get_running_loop().create_task(self._load_in_background())
        # Registered before the task runs, so back-to-back calls see it as loading
        self._fetching.add(task)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def load_next(self) -> FetchOutcome[E]:
        """Fetch the next page, apply it and run the matching callback.

        Awaitable counterpart of ``load_more()``; ignores the concurrency policy.
        """
        page_index = self._page_index
        self._pending += 1
        try:
            outcome = await resolve_outcome(self.fetch_page, page_index)
        finally:
            self._pending -= 1
        return self._settle(page_index, outcome)

    async def _load_in_background(self) -> FetchOutcome[E]:
        page_index = self._page_index
        try:
            outcome = await resolve_outcome(self.fetch_page, page_index)
        finally:
            # Callbacks below may start the next fetch
            self._fetching.discard(asyncio.current_task())  # type: ignore[arg-type]
        return self._settle(page_index, outcome)

    def _settle(self, page_index: int, outcome: FetchOutcome[E]) -> FetchOutcome[E]:
        match outcome:
            case Success(page=page):
                self._apply_page(page)
                logger.debug("page_loaded", page_index=page_index, count=len(page.items), total=len(self._items))
                if self._on_success is not None:
                    self._on_success(page)
            case Failure(error=error):
                if self._on_error is not None:
                    self._on_error(error)
                else:
                    logger.debug("page_error_dropped", page_index=page_index, error=str(error))
        return outcome

    def _apply_page(self, page: Page[E]) -> None:
        # Index first so listeners see the state after the whole page is applied
        self._page_index += 1
        self._last_page = page
        self._items.extend(page.items)

    def _on_task_done(self, task: asyncio.Task[FetchOutcome[E]]) -> None:
        self._tasks.discard(task)
        # A task cancelled before its first step never reaches its own cleanup
        self._fetching.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("load_more_callback_failed", error=str(error), exc_info=error)
