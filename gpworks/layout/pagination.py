"""
Document Pagination Planner

Splits a row list into fixed-capacity pages for fixed-layout documents
(abstract: 10 rows per page, measurement book: 12). The capacity comes
from the caller; the planner only chunks.

Serial numbers run on across pages, and every page except the first
carries a "Brought Forward" marker, every page except the last a
"Carry Forward" marker.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from ..errors import ValidationError
from ..estimate.quantities import round_currency

logger = logging.getLogger(__name__)

T = TypeVar("T")

BROUGHT_FORWARD_TEXT = "Brought Forward..."
CARRY_FORWARD_TEXT = "Carry Forward..."


@dataclass
class PaginatedBlock(Generic[T]):
    """The rows that go on one logical page."""
    index: int
    items: List[T]
    first_serial: int
    brought_forward: bool
    carry_forward: bool
    page_total: Optional[float] = None
    brought_forward_amount: Optional[float] = None
    carry_forward_amount: Optional[float] = None

    @property
    def last_serial(self) -> int:
        return self.first_serial + len(self.items) - 1

    def serials(self) -> List[int]:
        return list(range(self.first_serial, self.first_serial + len(self.items)))

    def numbered(self):
        """(serial, item) pairs for the page."""
        return list(zip(self.serials(), self.items))


def _check_capacity(capacity) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise ValidationError(f"capacity must be an integer (got {capacity!r})", "capacity")
    if capacity < 1:
        raise ValidationError(f"capacity must be at least 1 (got {capacity})", "capacity")
    return capacity


def paginate(items: Iterable[T], capacity: int) -> List[PaginatedBlock[T]]:
    """
    Chunk items into pages of at most `capacity` rows, in order.

    An empty list gives no pages at all.

    Raises:
        ValidationError: capacity is not a positive integer
    """
    capacity = _check_capacity(capacity)
    rows = list(items)

    chunks = [rows[start:start + capacity] for start in range(0, len(rows), capacity)]
    last = len(chunks) - 1

    blocks = []
    serial = 1
    for index, chunk in enumerate(chunks):
        blocks.append(PaginatedBlock(
            index=index,
            items=chunk,
            first_serial=serial,
            brought_forward=index > 0,
            carry_forward=index < last,
        ))
        serial += len(chunk)

    logger.debug(f"Paginated {len(rows)} rows into {len(blocks)} pages of {capacity}")
    return blocks


def paginate_with_totals(
    items: Iterable[T],
    capacity: int,
    amount_of: Callable[[T], float] = lambda item: item.amount,
) -> List[PaginatedBlock[T]]:
    """
    paginate() plus running amounts for the forward markers.

    brought_forward_amount is the total of all earlier pages;
    carry_forward_amount is that plus this page's total.
    """
    blocks = paginate(items, capacity)

    running = 0.0
    for block in blocks:
        page_total = round_currency(sum(amount_of(item) for item in block.items))
        block.page_total = page_total
        block.brought_forward_amount = round_currency(running) if block.brought_forward else None
        running = round_currency(running + page_total)
        block.carry_forward_amount = running if block.carry_forward else None

    return blocks
