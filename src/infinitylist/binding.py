"""Headless binding between a list view and a PaginationController.

A UI toolkit wires its own events to these hooks: ``on_appear`` when the
list is first shown, ``on_item_appear`` when a row is rendered. The binding
never renders anything itself.
"""

from collections.abc import Hashable, Sequence

import structlog

from infinitylist.core.controller import PaginationController

logger = structlog.get_logger(__name__)


class InfinityListBinding[E]:
    """Translates view lifecycle events into controller calls."""

    def __init__(self, controller: PaginationController[E]) -> None:
        self.controller = controller

    @property
    def items(self) -> Sequence[E]:
        return self.controller.items

    def on_appear(self) -> None:
        """List became visible: request the first page."""
        logger.debug("list_appeared", page_index=self.controller.page_index)
        self.controller.load_more()

    def on_item_appear(self, item: E) -> bool:
        """Row for ``item`` was rendered. Returns True if a fetch was requested.

        Stops requesting once the latest page reported ``has_more`` False.
        """
        if not self.controller.should_load_more(item):
            return False
        if not self.controller.has_more:
            logger.debug("list_exhausted", page_index=self.controller.page_index)
            return False
        return self.controller.load_more() is not None

    @staticmethod
    def item_key(item: E) -> Hashable:
        """Stable key for a row: the item's ``id`` if it has one, else the item."""
        item_id = getattr(item, "id", None)
        return item_id if item_id is not None else item
