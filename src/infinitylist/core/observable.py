"""Append-only list that notifies subscribers when it grows."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, overload

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ItemsChanged[T]:
    """A batch of items appended in one step."""

    added: tuple[T, ...]
    start: int  # Index of the first added item
    total: int  # List length after the append


type ItemsListener[T] = Callable[[ItemsChanged[T]], Any]


class ObservableList[T](Sequence[T]):
    """Read-only sequence view over an append-only list with change listeners.

    Consumers read it like any sequence and subscribe to be told about
    appends. Only the owner calls ``extend``.
    """

    def __init__(self) -> None:
        self._items: list[T] = []
        self._listeners: list[ItemsListener[T]] = []

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableList):
            return self._items == other._items
        if isinstance(other, list | tuple):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ObservableList({self._items!r})"

    def subscribe(self, listener: ItemsListener[T]) -> None:
        """Register a listener called after every append."""
        if listener not in self._listeners:
            self._listeners.append(listener)
            logger.debug("items_listener_subscribed", listener_count=len(self._listeners))

    def unsubscribe(self, listener: ItemsListener[T]) -> bool:
        """Remove a listener. Returns False if it was not subscribed."""
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def clear_subscriptions(self) -> None:
        self._listeners.clear()

    def extend(self, items: Iterable[T]) -> ItemsChanged[T]:
        """Append items in order, then notify every listener once."""
        added = tuple(items)
        start = len(self._items)
        self._items.extend(added)
        change = ItemsChanged(added=added, start=start, total=len(self._items))
        self._notify(change)
        return change

    def _notify(self, change: ItemsChanged[T]) -> None:
        # Copy so listeners may unsubscribe themselves while being notified
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                # A broken listener must not starve the others
                logger.exception("items_listener_failed", start=change.start, added=len(change.added))
