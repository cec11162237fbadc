"""
Quantity / Amount Computation Engine

Derives quantity and amount for every node of an estimate tree and the
sequential document total chain:

    itemwise total
      → GST (18%)
      → cost excluding LWC
      → LWC (1% of cost excluding LWC)
      → cost including LWC
      → + contingency = grand total

Precision:
- quantities are rounded to 3 decimals (round_quantity)
- currency is rounded to 2 decimals (round_currency)
Both round half-up, the way the printed estimate sheets are checked by hand.

All functions are pure: they return new objects and never mutate input.
"""

import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from ..errors import ValidationError, require_non_negative
from .models import (
    DocumentTotals,
    EstimateDocument,
    EstimateLineItem,
    Measurement,
    SubItem,
)
from .units import unit_kind

logger = logging.getLogger(__name__)

QUANTITY_PLACES = 3
CURRENCY_PLACES = 2

DEFAULT_GST_PERCENT = 18.0
DEFAULT_LWC_PERCENT = 1.0


# =============================================================================
# ROUNDING
# =============================================================================

def _round_half_up(value: float, places: int) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    try:
        return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"value out of range: {value!r}")


def round_quantity(value: float) -> float:
    """Round a quantity to 3 decimals."""
    return float(_round_half_up(value, QUANTITY_PLACES))


def round_currency(value: float) -> float:
    """Round a currency amount to 2 decimals."""
    return float(_round_half_up(value, CURRENCY_PLACES))


def round_rupees(value: float) -> int:
    """Round a currency amount to whole rupees (half-up)."""
    return int(_round_half_up(value, 0))


# =============================================================================
# MEASUREMENTS
# =============================================================================

def compute_measurement_quantity(
    nos: Optional[float] = 0,
    length: Optional[float] = 0,
    breadth: Optional[float] = 0,
    depth: Optional[float] = 0,
) -> float:
    """
    Quantity of one nos × L × B × D measurement.

    Zero (or absent) fields count as 1 in the product, so a running-metre
    entry (nos=0, length=5) gives 5 rather than 0. Only when all four
    fields are zero is the quantity 0. Measurement books are written this
    way; keep the rule.

    Raises:
        ValidationError: any field is negative or not a number
    """
    values = [
        require_non_negative(nos, "nos"),
        require_non_negative(length, "length"),
        require_non_negative(breadth, "breadth"),
        require_non_negative(depth, "depth"),
    ]

    if all(v == 0 for v in values):
        return 0.0

    quantity = 1.0
    for v in values:
        quantity *= v if v != 0 else 1.0

    return round_quantity(quantity)


def compute_measurement(measurement: Measurement) -> Measurement:
    """Return a copy of the measurement with its quantity recomputed."""
    quantity = compute_measurement_quantity(
        measurement.nos, measurement.length, measurement.breadth, measurement.depth,
    )
    return replace(measurement, quantity=quantity)


def _sum_quantities(measurements: Iterable[Measurement]) -> float:
    return round_quantity(sum(m.quantity for m in measurements))


# =============================================================================
# LINE ITEMS
# =============================================================================

def compute_sub_item(sub_item: SubItem) -> SubItem:
    """Recompute a sub-item from its measurements (or entered quantity) and rate."""
    unit_kind(sub_item.unit)
    rate = require_non_negative(sub_item.rate, "rate")

    if sub_item.measurements:
        measurements = [compute_measurement(m) for m in sub_item.measurements]
        quantity = _sum_quantities(measurements)
    else:
        measurements = []
        quantity = round_quantity(require_non_negative(sub_item.quantity, "quantity"))

    return replace(
        sub_item,
        rate=rate,
        quantity=quantity,
        measurements=measurements,
        amount=round_currency(quantity * rate),
    )


def compute_line_item_totals(item: EstimateLineItem) -> EstimateLineItem:
    """
    Recompute quantity and amount of a line item.

    - sub-items: quantity and amount are the sums over the sub-items;
      the parent's own rate does not enter the amount
    - measurements: quantity = Σ measurement quantity, amount = quantity × rate
    - otherwise: the entered quantity, amount = quantity × rate

    The input amount is always ignored.

    Raises:
        ValidationError: negative rate/quantity/dimension or unknown unit
    """
    unit_kind(item.unit)
    rate = require_non_negative(item.rate, "rate")

    if item.sub_items:
        sub_items = [compute_sub_item(s) for s in item.sub_items]
        quantity = round_quantity(sum(s.quantity for s in sub_items))
        amount = round_currency(sum(s.amount for s in sub_items))
        return replace(
            item,
            rate=rate,
            sub_items=sub_items,
            quantity=quantity,
            amount=amount,
        )

    if item.measurements:
        measurements = [compute_measurement(m) for m in item.measurements]
        quantity = _sum_quantities(measurements)
        return replace(
            item,
            rate=rate,
            measurements=measurements,
            quantity=quantity,
            amount=round_currency(quantity * rate),
        )

    quantity = round_quantity(require_non_negative(item.quantity, "quantity"))
    return replace(
        item,
        rate=rate,
        quantity=quantity,
        amount=round_currency(quantity * rate),
    )


def compute_items(items: Iterable[EstimateLineItem]) -> List[EstimateLineItem]:
    """Recompute every item, tagging errors with the item's serial number."""
    computed = []
    for item in items:
        try:
            computed.append(compute_line_item_totals(item))
        except ValidationError as e:
            raise ValidationError(e.message, f"item {item.sl_no}.{e.field or 'value'}")
    return computed


# =============================================================================
# DOCUMENT TOTALS
# =============================================================================

def compute_document_totals(
    items: Iterable[EstimateLineItem],
    contingency: float = 0.0,
    gst_percent: float = DEFAULT_GST_PERCENT,
    lwc_percent: float = DEFAULT_LWC_PERCENT,
) -> DocumentTotals:
    """
    Run the full total chain from the current items.

    Items are recomputed on every call; nothing is carried over from a
    previous run.

    Args:
        items: Line items (amounts on input are ignored)
        contingency: Lump sum added after LWC
        gst_percent: GST on itemwise total
        lwc_percent: Labour Welfare Cess on cost excluding LWC

    Returns:
        DocumentTotals
    """
    contingency = round_currency(require_non_negative(contingency, "contingency"))
    gst_percent = require_non_negative(gst_percent, "gst_percent")
    lwc_percent = require_non_negative(lwc_percent, "lwc_percent")

    computed = compute_items(items)

    itemwise_total = round_currency(sum(item.amount for item in computed))
    gst_amount = round_currency(itemwise_total * gst_percent / 100)
    cost_excl_lwc = round_currency(itemwise_total + gst_amount)
    lwc_amount = round_currency(cost_excl_lwc * lwc_percent / 100)
    cost_incl_lwc = round_currency(cost_excl_lwc + lwc_amount)
    grand_total = round_currency(cost_incl_lwc + contingency)

    logger.debug(
        f"Totals over {len(computed)} items: itemwise={itemwise_total} "
        f"gst={gst_amount} lwc={lwc_amount} grand={grand_total}"
    )

    return DocumentTotals(
        itemwise_total=itemwise_total,
        gst_amount=gst_amount,
        cost_excl_lwc=cost_excl_lwc,
        lwc_amount=lwc_amount,
        cost_incl_lwc=cost_incl_lwc,
        contingency=contingency,
        grand_total=grand_total,
        rounded_grand_total=round_rupees(grand_total),
    )


def recompute_document(
    document: EstimateDocument,
    gst_percent: float = DEFAULT_GST_PERCENT,
    lwc_percent: float = DEFAULT_LWC_PERCENT,
) -> Tuple[EstimateDocument, DocumentTotals]:
    """Recompute the whole tree and its totals. Call before every render or save."""
    items = compute_items(document.items)
    totals = compute_document_totals(
        items,
        contingency=document.contingency,
        gst_percent=gst_percent,
        lwc_percent=lwc_percent,
    )
    logger.info(
        f"Recomputed estimate '{document.project.project_name}': "
        f"{len(items)} items, grand total {totals.grand_total:.2f}"
    )
    return replace(document, items=items), totals
