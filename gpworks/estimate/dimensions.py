"""
Road estimates: set L / B / D once and apply to every dimensional item.

Unlike a measurement row, the unit decides which dimensions enter the
product (a sqm item ignores depth, a running-metre item ignores breadth).
"""

import logging
from dataclasses import replace
from typing import Iterable, List

from ..errors import require_non_negative
from .models import EstimateLineItem
from .quantities import compute_line_item_totals, round_quantity
from .units import UnitKind, is_dimensional, unit_kind

logger = logging.getLogger(__name__)


def quantity_from_dimensions(
    unit: str,
    nos: float,
    length: float,
    breadth: float,
    depth: float,
) -> float:
    """
    Unit-driven quantity formula.

    m/rm  → nos × L
    sqm   → nos × L × B
    cum   → nos × L × B × D
    nos   → nos
    other → nos × L × B × D
    """
    nos = require_non_negative(nos, "nos")
    length = require_non_negative(length, "length")
    breadth = require_non_negative(breadth, "breadth")
    depth = require_non_negative(depth, "depth")

    kind = unit_kind(unit)
    if kind == UnitKind.LENGTH:
        quantity = nos * length
    elif kind == UnitKind.AREA:
        quantity = nos * length * breadth
    elif kind == UnitKind.COUNT:
        quantity = nos
    else:
        quantity = nos * length * breadth * depth

    return round_quantity(quantity)


def dimension_item(item: EstimateLineItem, length: float, breadth: float, depth: float) -> EstimateLineItem:
    """
    Put new L/B/D on one area/volume item and re-derive it.

    Sub-item parents only take the dimensions for display; their quantity
    stays the sum of the sub-items. Area items carry depth 0.
    """
    kind = unit_kind(item.unit)
    depth_for_item = 0.0 if kind == UnitKind.AREA else depth

    if item.has_sub_items:
        updated = replace(item, length=length, breadth=breadth, depth=depth_for_item)
        return compute_line_item_totals(updated)

    nos = item.nos or 1
    quantity = quantity_from_dimensions(item.unit, nos, length, breadth, depth_for_item)
    updated = replace(
        item,
        length=length,
        breadth=breadth,
        depth=depth_for_item,
        quantity=quantity,
    )
    return compute_line_item_totals(updated)


def apply_global_dimensions(
    items: Iterable[EstimateLineItem],
    length: float,
    breadth: float,
    depth: float,
) -> List[EstimateLineItem]:
    """
    Apply road dimensions to all area/volume items.

    Items linked to drain parameters and items with their own measurements
    are left alone.
    """
    length = require_non_negative(length, "length")
    breadth = require_non_negative(breadth, "breadth")
    depth = require_non_negative(depth, "depth")

    updated = []
    changed = 0
    for item in items:
        if not is_dimensional(item.unit) or item.linked_params or item.has_measurements:
            updated.append(item)
            continue
        updated.append(dimension_item(item, length, breadth, depth))
        changed += 1

    logger.debug(f"Global dimensions L={length} B={breadth} D={depth} applied to {changed} items")
    return updated
