"""Page fetcher contract and outcome normalisation."""

import asyncio
from typing import Any, Protocol

import structlog

from infinitylist.core.pagination import Failure, FetchOutcome, Page, Success

logger = structlog.get_logger(__name__)


class PageFetcher(Protocol):
    """Async callable that loads the page with the given index.

    It may return a ``Page`` (success), return a ``Success``/``Failure``
    directly, or raise an exception (failure).
    """

    async def __call__(self, page_index: int, /) -> Page[Any] | FetchOutcome[Any]: ...


async def never_fetch(page_index: int, /) -> Page[Any]:
    """Default fetcher: never resolves, so no callback ever fires."""
    return await asyncio.get_running_loop().create_future()


async def resolve_outcome(fetcher: PageFetcher, page_index: int) -> FetchOutcome[Any]:
    """Run a fetcher and turn whatever it produces into a FetchOutcome.

    Args:
        fetcher: Fetcher to call
        page_index: Index passed to the fetcher

    Returns:
        ``Success`` wrapping the fetched page, or ``Failure`` wrapping the error.
        Cancellation is not a failure and propagates.
    """
    try:
        result = await fetcher(page_index)
    except Exception as e:
        logger.debug("page_fetch_failed", page_index=page_index, error=str(e))
        return Failure(e)

    if isinstance(result, Success | Failure):
        return result
    if isinstance(result, Page):
        return Success(result)
    error = TypeError(f"Fetcher returned {type(result).__name__}, expected Page or FetchOutcome")
    logger.error("page_fetch_invalid_result", page_index=page_index, result_type=type(result).__name__)
    return Failure(error)
