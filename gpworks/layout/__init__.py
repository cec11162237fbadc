"""
Document layout: fixed-capacity pagination and booklet imposition.
"""

from .pagination import (
    BROUGHT_FORWARD_TEXT,
    CARRY_FORWARD_TEXT,
    PaginatedBlock,
    paginate,
    paginate_with_totals,
)
from .booklet import (
    BookletSheet,
    apply_page_numbers,
    half_sheet_scale,
    impose_booklet,
    padded_page_count,
    plan_booklet,
)

__all__ = [
    "BROUGHT_FORWARD_TEXT",
    "CARRY_FORWARD_TEXT",
    "PaginatedBlock",
    "paginate",
    "paginate_with_totals",
    "BookletSheet",
    "apply_page_numbers",
    "half_sheet_scale",
    "impose_booklet",
    "padded_page_count",
    "plan_booklet",
]
