"""
Units of measure for estimate line items.

Schedule-of-rates units are free text on the form ("Cum", "sqm", "Nos",
"L.S"); every one must map onto a closed set of unit kinds.
"""

from enum import Enum
from typing import Dict

from ..errors import ValidationError


class UnitKind(Enum):
    """Kind of quantity a unit measures."""
    LENGTH = "length"
    AREA = "area"
    VOLUME = "volume"
    COUNT = "count"
    LUMPSUM = "lumpsum"
    MASS = "mass"


UNIT_KINDS: Dict[str, UnitKind] = {
    # Length
    "m": UnitKind.LENGTH,
    "rm": UnitKind.LENGTH,
    "rmt": UnitKind.LENGTH,
    "metre": UnitKind.LENGTH,
    "meter": UnitKind.LENGTH,
    # Area
    "sqm": UnitKind.AREA,
    "m2": UnitKind.AREA,
    "sq.m": UnitKind.AREA,
    # Volume
    "cum": UnitKind.VOLUME,
    "m3": UnitKind.VOLUME,
    "cu.m": UnitKind.VOLUME,
    # Count
    "no": UnitKind.COUNT,
    "nos": UnitKind.COUNT,
    "each": UnitKind.COUNT,
    "piece": UnitKind.COUNT,
    "pc": UnitKind.COUNT,
    "set": UnitKind.COUNT,
    # Lump sum
    "ls": UnitKind.LUMPSUM,
    "l.s": UnitKind.LUMPSUM,
    "l.s.": UnitKind.LUMPSUM,
    "lumpsum": UnitKind.LUMPSUM,
    "lump sum": UnitKind.LUMPSUM,
    # Mass
    "kg": UnitKind.MASS,
    "kilogram": UnitKind.MASS,
    "mt": UnitKind.MASS,
    "ton": UnitKind.MASS,
    "tonne": UnitKind.MASS,
    "quintal": UnitKind.MASS,
}


def normalize_unit(unit: str) -> str:
    return (unit or "").strip().lower()


def unit_kind(unit: str) -> UnitKind:
    """
    Classify a unit string.

    Raises:
        ValidationError: unit is empty or not in the closed set
    """
    key = normalize_unit(unit)
    if not key:
        raise ValidationError("unit is required", "unit")
    try:
        return UNIT_KINDS[key]
    except KeyError:
        raise ValidationError(f"unknown unit {unit!r}", "unit")


def is_dimensional(unit: str) -> bool:
    """True for units whose quantity comes from L/B/D (area and volume)."""
    return unit_kind(unit) in (UnitKind.AREA, UnitKind.VOLUME)
