from abc import ABC


class InfinityListError(ABC, Exception):
    """Base class for all infinitylist errors."""


class ValidationError(InfinityListError):
    """Raised when controller or configuration input fails validation."""


class FetchError(InfinityListError):
    """Raised by page fetchers to report that a page could not be loaded.

    Fetchers are free to raise any exception; this one only carries the
    page index that failed, which is handy inside ``on_error`` callbacks.
    """

    def __init__(self, message: str = "Page fetch failed", page_index: int | None = None) -> None:
        super().__init__(message)
        self.page_index = page_index
