"""
Estimate data structures.

Line item tree:
    EstimateLineItem
      ├── measurements: nos × L × B × D rows, or
      └── sub_items (a, b, c ...), each with its own measurements

quantity / amount on every node are derived fields. Recompute with
estimate.quantities; never set them by hand.
"""

import string
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Measurement:
    """One physical measurement contributing to a line item's quantity."""
    description: str = ""
    nos: float = 0.0
    length: float = 0.0
    breadth: float = 0.0
    depth: float = 0.0
    quantity: float = 0.0  # derived, 3 dp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "nos": self.nos,
            "length": self.length,
            "breadth": self.breadth,
            "depth": self.depth,
            "quantity": self.quantity,
        }


@dataclass
class SubItem:
    """Lettered breakdown of a line item. Cannot nest further."""
    description: str
    unit: str
    rate: float = 0.0
    quantity: float = 0.0  # entered when there are no measurements
    measurements: List[Measurement] = field(default_factory=list)
    amount: float = 0.0  # derived, 2 dp
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "unit": self.unit,
            "rate": self.rate,
            "quantity": self.quantity,
            "amount": self.amount,
            "measurements": [m.to_dict() for m in self.measurements],
        }


@dataclass
class EstimateLineItem:
    """
    A priced row of a works estimate.

    nos/length/breadth/depth are the item's own dimensions, used by the
    road/drain dimension formulas and printed on the estimate sheet. The
    *_param fields link a dimension to a drain master parameter.
    """
    sl_no: int
    description: str
    unit: str
    rate: float = 0.0
    quantity: float = 0.0
    schedule_page_no: str = ""
    measurements: List[Measurement] = field(default_factory=list)
    sub_items: List[SubItem] = field(default_factory=list)
    nos: float = 1.0
    length: float = 0.0
    breadth: float = 0.0
    depth: float = 0.0
    length_param: Optional[str] = None
    breadth_param: Optional[str] = None
    depth_param: Optional[str] = None
    amount: float = 0.0
    id: Optional[str] = None

    @property
    def has_sub_items(self) -> bool:
        return len(self.sub_items) > 0

    @property
    def has_measurements(self) -> bool:
        return len(self.measurements) > 0

    @property
    def shows_dimensions(self) -> bool:
        """Parent dimensions are suppressed on the sheet when sub-items exist."""
        return not self.has_sub_items

    @property
    def linked_params(self) -> bool:
        return bool(self.length_param or self.breadth_param or self.depth_param)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sl_no": self.sl_no,
            "schedule_page_no": self.schedule_page_no,
            "description": self.description,
            "unit": self.unit,
            "rate": self.rate,
            "nos": self.nos,
            "length": self.length,
            "breadth": self.breadth,
            "depth": self.depth,
            "quantity": self.quantity,
            "amount": self.amount,
            "measurements": [m.to_dict() for m in self.measurements],
            "sub_items": [s.to_dict() for s in self.sub_items],
        }


@dataclass
class ProjectInfo:
    """Work metadata printed on every estimate document."""
    project_name: str = ""
    project_code: str = ""
    location: str = ""
    prepared_by: str = ""
    fund: str = ""
    date: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_name": self.project_name,
            "project_code": self.project_code,
            "location": self.location,
            "prepared_by": self.prepared_by,
            "fund": self.fund,
            "date": self.date,
        }


@dataclass
class DocumentTotals:
    """Sequential total chain of an estimate. All values are currency (2 dp)."""
    itemwise_total: float
    gst_amount: float
    cost_excl_lwc: float
    lwc_amount: float
    cost_incl_lwc: float
    contingency: float
    grand_total: float
    rounded_grand_total: int  # "say" figure, whole rupees

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemwise_total": self.itemwise_total,
            "gst_amount": self.gst_amount,
            "cost_excl_lwc": self.cost_excl_lwc,
            "lwc_amount": self.lwc_amount,
            "cost_incl_lwc": self.cost_incl_lwc,
            "contingency": self.contingency,
            "grand_total": self.grand_total,
            "rounded_grand_total": self.rounded_grand_total,
        }


@dataclass
class EstimateDocument:
    """Project metadata plus the ordered item tree."""
    project: ProjectInfo
    items: List[EstimateLineItem] = field(default_factory=list)
    contingency: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "contingency": self.contingency,
        }


def sub_item_label(index: int) -> str:
    """0 -> 'a', 25 -> 'z', 26 -> 'aa'."""
    letters = string.ascii_lowercase
    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = letters[rem] + label
    return label
