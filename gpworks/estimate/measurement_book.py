"""
Estimate → Measurement Book rows.

The MB records what was actually measured on site. Rows come either from
saved MB entries (quantity/amount may be blank) or from a computed
estimate tree, and are numbered continuously.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..errors import require_non_negative
from .models import EstimateLineItem, sub_item_label
from .quantities import compute_measurement_quantity, round_currency, round_quantity

logger = logging.getLogger(__name__)

DEFAULT_MB_UNIT = "cum"


@dataclass
class MBEntry:
    """A raw measurement book entry as stored by the MB form."""
    description: str
    nos: Optional[float] = None
    length: float = 0.0
    breadth: float = 0.0
    depth: float = 0.0
    quantity: Optional[float] = None
    unit: str = DEFAULT_MB_UNIT
    rate: float = 0.0
    amount: Optional[float] = None


@dataclass
class MBRow:
    """A numbered row ready for the measurement book page."""
    sl_no: int
    description: str
    nos: float
    length: float
    breadth: float
    depth: float
    quantity: float  # 3 dp
    unit: str
    rate: float
    amount: float  # 2 dp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sl_no": self.sl_no,
            "description": self.description,
            "nos": self.nos,
            "length": self.length,
            "breadth": self.breadth,
            "depth": self.depth,
            "quantity": self.quantity,
            "unit": self.unit,
            "rate": self.rate,
            "amount": self.amount,
        }


def to_mb_rows(entries: Iterable[MBEntry], derive_quantity: bool = True) -> List[MBRow]:
    """
    Number MB entries and fill in missing quantity / amount.

    - nos defaults to 1
    - a blank or zero quantity is derived from the dimensions when any of
      L/B/D is set (zero dimensions count as 1), unless derive_quantity
      is False
    - a blank or zero amount is quantity × rate
    """
    rows = []
    for index, entry in enumerate(entries):
        nos = require_non_negative(entry.nos, "nos") or 1.0
        length = require_non_negative(entry.length, "length")
        breadth = require_non_negative(entry.breadth, "breadth")
        depth = require_non_negative(entry.depth, "depth")
        rate = require_non_negative(entry.rate, "rate")

        quantity = require_non_negative(entry.quantity, "quantity")
        if derive_quantity and quantity == 0 and (length > 0 or breadth > 0 or depth > 0):
            quantity = compute_measurement_quantity(nos, length, breadth, depth)
        quantity = round_quantity(quantity)

        amount = require_non_negative(entry.amount, "amount")
        if amount == 0 and rate > 0 and quantity > 0:
            amount = quantity * rate
        amount = round_currency(amount)

        rows.append(MBRow(
            sl_no=index + 1,
            description=entry.description or "",
            nos=nos,
            length=length,
            breadth=breadth,
            depth=depth,
            quantity=quantity,
            unit=entry.unit or DEFAULT_MB_UNIT,
            rate=rate,
            amount=amount,
        ))

    return rows


def line_items_to_mb_entries(items: Iterable[EstimateLineItem]) -> List[MBEntry]:
    """
    Flatten a computed estimate tree into MB entries.

    Each measurement becomes its own entry priced at the item's rate; sub-items
    are expanded with their letter; items with neither give a single entry.
    """
    entries = []
    for item in items:
        if item.sub_items:
            for index, sub in enumerate(item.sub_items):
                label = f"{item.sl_no}{sub_item_label(index)}"
                entries.extend(_entries_for(
                    f"({label}) {sub.description}", sub.unit, sub.rate, sub.quantity, sub.measurements,
                ))
        else:
            entries.extend(_entries_for(
                item.description, item.unit, item.rate, item.quantity, item.measurements,
                nos=item.nos, length=item.length, breadth=item.breadth, depth=item.depth,
            ))

    logger.debug(f"Flattened estimate into {len(entries)} MB entries")
    return entries


def _entries_for(description, unit, rate, quantity, measurements, nos=None, length=0.0, breadth=0.0, depth=0.0):
    if not measurements:
        return [MBEntry(
            description=description,
            nos=nos,
            length=length,
            breadth=breadth,
            depth=depth,
            quantity=quantity,
            unit=unit,
            rate=rate,
        )]

    entries = []
    for m in measurements:
        text = f"{description} - {m.description}" if m.description else description
        entries.append(MBEntry(
            description=text,
            nos=m.nos,
            length=m.length,
            breadth=m.breadth,
            depth=m.depth,
            quantity=m.quantity,
            unit=unit,
            rate=rate,
        ))
    return entries


def estimate_to_mb(items: Iterable[EstimateLineItem]) -> List[MBRow]:
    """
    Numbered MB rows for a computed estimate tree.

    Quantities are taken as computed; an item with zero quantity stays
    zero in the MB even when its dimensions are filled in.
    """
    rows = to_mb_rows(line_items_to_mb_entries(items), derive_quantity=False)
    logger.info(f"Estimate -> MB: {len(rows)} rows")
    return rows
