"""
Estimate Computation Engine

Modules:
- units: closed set of unit kinds
- models: line item / sub-item / measurement tree and document totals
- quantities: nos × L × B × D rule, item roll-up, GST → LWC → grand total chain
- dimensions: road estimates (global L/B/D by unit formula)
- drain: drain master parameters and linked items
- measurement_book: estimate → numbered MB rows
- schema: pydantic input records
"""

from .units import UnitKind, unit_kind
from .models import (
    DocumentTotals,
    EstimateDocument,
    EstimateLineItem,
    Measurement,
    ProjectInfo,
    SubItem,
    sub_item_label,
)
from .quantities import (
    compute_document_totals,
    compute_line_item_totals,
    compute_measurement_quantity,
    recompute_document,
    round_currency,
    round_quantity,
    round_rupees,
)
from .dimensions import apply_global_dimensions, quantity_from_dimensions
from .drain import DrainParams, apply_drain_params, derive_drain_params
from .measurement_book import MBEntry, MBRow, estimate_to_mb, line_items_to_mb_entries, to_mb_rows
from .schema import load_estimate, parse_estimate

__all__ = [
    "UnitKind",
    "unit_kind",
    "DocumentTotals",
    "EstimateDocument",
    "EstimateLineItem",
    "Measurement",
    "ProjectInfo",
    "SubItem",
    "sub_item_label",
    "compute_document_totals",
    "compute_line_item_totals",
    "compute_measurement_quantity",
    "recompute_document",
    "round_currency",
    "round_quantity",
    "round_rupees",
    "apply_global_dimensions",
    "quantity_from_dimensions",
    "DrainParams",
    "apply_drain_params",
    "derive_drain_params",
    "MBEntry",
    "MBRow",
    "estimate_to_mb",
    "line_items_to_mb_entries",
    "to_mb_rows",
    "load_estimate",
    "parse_estimate",
]
