"""
Drain Estimate - master parameters

A drain estimate is driven by a handful of master dimensions entered once
at the top of the sheet. Items link their length/breadth/depth to one of
these parameters; changing a parameter re-derives every linked item.

Derived parameters (PWD practice):
- Bed slope 1:300 → depth at D/S = depth at U/S + length / 300
- Width of earth cutting = clear width + 2 × (brick work + CC + sand filling)
- Average depth of earth cutting = average depth of brick work
  = (depth at U/S + depth at D/S) / 2

All derived values are rounded to 3 decimals.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Dict, Iterable, List

from ..errors import ValidationError, require_non_negative
from .dimensions import dimension_item
from .models import EstimateLineItem
from .quantities import round_quantity
from .units import is_dimensional

logger = logging.getLogger(__name__)

BED_SLOPE_RATIO = 300

PARAM_LABELS: Dict[str, str] = {
    "length_of_drain": "Length of Drain (M)",
    "clear_width_of_drain": "Clear Width of Drain (M)",
    "depth_us": "Depth at U/S (M)",
    "depth_ds": "Depth at D/S (M)",
    "cc_thickness_foundation": "CC (1:1.5:3) thickness at foundation (M)",
    "sand_filling_foundation": "Sand filling at foundation (M)",
    "width_brick_work": "Width of Brick work 6:1 (M)",
    "width_earth_cutting": "Width of Earth Cutting (M)",
    "avg_depth_earth_cutting": "Average Depth of Earth Cutting (M)",
    "avg_depth_brick_work": "Average Depth of Brick Work (M)",
}

CALCULATED_PARAMS = (
    "depth_ds",
    "width_earth_cutting",
    "avg_depth_earth_cutting",
    "avg_depth_brick_work",
)


@dataclass
class DrainParams:
    """Master dimensions of a drain estimate, in metres."""
    length_of_drain: float = 0.0
    clear_width_of_drain: float = 0.300
    depth_us: float = 0.400
    depth_ds: float = 0.0
    cc_thickness_foundation: float = 0.075
    sand_filling_foundation: float = 0.050
    width_brick_work: float = 0.250
    width_earth_cutting: float = 0.0
    avg_depth_earth_cutting: float = 0.0
    avg_depth_brick_work: float = 0.0

    def get(self, key: str) -> float:
        if key not in PARAM_LABELS:
            raise ValidationError(f"unknown drain parameter {key!r}", "param")
        return getattr(self, key)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def calc_depth_ds(depth_us: float, length_of_drain: float) -> float:
    depth_us = require_non_negative(depth_us, "depth_us")
    length_of_drain = require_non_negative(length_of_drain, "length_of_drain")
    return round_quantity(depth_us + length_of_drain / BED_SLOPE_RATIO)


def calc_width_earth_cutting(
    clear_width_of_drain: float,
    width_brick_work: float,
    cc_thickness_foundation: float,
    sand_filling_foundation: float,
) -> float:
    clear_width_of_drain = require_non_negative(clear_width_of_drain, "clear_width_of_drain")
    width_brick_work = require_non_negative(width_brick_work, "width_brick_work")
    cc_thickness_foundation = require_non_negative(cc_thickness_foundation, "cc_thickness_foundation")
    sand_filling_foundation = require_non_negative(sand_filling_foundation, "sand_filling_foundation")
    return round_quantity(
        clear_width_of_drain
        + 2 * width_brick_work
        + 2 * cc_thickness_foundation
        + 2 * sand_filling_foundation
    )


def calc_average_depth(depth_us: float, depth_ds: float) -> float:
    depth_us = require_non_negative(depth_us, "depth_us")
    depth_ds = require_non_negative(depth_ds, "depth_ds")
    return round_quantity((depth_us + depth_ds) / 2)


def derive_drain_params(params: DrainParams) -> DrainParams:
    """Fill in the calculated parameters from the entered ones."""
    depth_ds = calc_depth_ds(params.depth_us, params.length_of_drain)
    average_depth = calc_average_depth(params.depth_us, depth_ds)

    return replace(
        params,
        depth_ds=depth_ds,
        width_earth_cutting=calc_width_earth_cutting(
            params.clear_width_of_drain,
            params.width_brick_work,
            params.cc_thickness_foundation,
            params.sand_filling_foundation,
        ),
        avg_depth_earth_cutting=average_depth,
        avg_depth_brick_work=average_depth,
    )


def resolve_item_dimensions(item: EstimateLineItem, params: DrainParams):
    """
    L, B, D for an item, taking linked parameters where set.

    A parameter that is zero falls back to the item's own dimension.
    """
    length = (params.get(item.length_param) if item.length_param else 0) or item.length
    breadth = (params.get(item.breadth_param) if item.breadth_param else 0) or item.breadth
    depth = (params.get(item.depth_param) if item.depth_param else 0) or item.depth
    return length, breadth, depth


def apply_drain_params(items: Iterable[EstimateLineItem], params: DrainParams) -> List[EstimateLineItem]:
    """Re-derive every area/volume item linked to a drain parameter."""
    params = derive_drain_params(params)

    updated = []
    for item in items:
        if not item.linked_params or not is_dimensional(item.unit):
            updated.append(item)
            continue
        length, breadth, depth = resolve_item_dimensions(item, params)
        updated.append(dimension_item(item, length, breadth, depth))

    logger.debug(f"Drain params applied: {params.to_dict()}")
    return updated
