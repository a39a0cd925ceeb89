from dataclasses import dataclass
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """Base model for list items with a stable identity for row keying.

    Items are frozen so they compare and hash by value.
    """

    id: UUID = Field(default_factory=uuid4)

    model_config = ConfigDict(frozen=True)


class Page[T](BaseModel):
    """One batch of items returned by a single fetch.

    Fields beyond ``items`` (cursors, totals, ...) are kept as-is and reach
    the success callback untouched. A page without ``has_more`` is assumed
    to be followed by another one.
    """

    items: list[T] = Field(..., description="Items of this page, in display order")

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)


class OffsetPage[T](Page[T]):
    """Page carrying offset pagination metadata."""

    total: int = Field(..., description="Total number of items across all pages", ge=0)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.offset + len(self.items) < self.total


@dataclass(frozen=True, slots=True)
class Success[T]:
    page: Page[T]


@dataclass(frozen=True, slots=True)
class Failure:
    error: Exception


type FetchOutcome[T] = Success[T] | Failure
