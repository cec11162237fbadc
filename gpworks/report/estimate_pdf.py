"""
Estimate Sheet PDF

Two modes:
- detailed: every line item with its measurements and lettered sub-items
- abstract: one row per line item

Both end with the total chain (GST, LWC, contingency) and the rounded
grand total in words. Items are chunked with paginate(). A line item and
its sub-rows stay together on one page unless the item alone is taller
than a page. When the rows of a chunk do not fit above the bottom margin,
the sheet continues on a new page with carry/brought-forward rows.
"""

import io
import logging
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..billing.words import rupees_in_words
from ..errors import ValidationError
from ..estimate.models import DocumentTotals, EstimateDocument, EstimateLineItem, sub_item_label
from ..estimate.quantities import round_currency
from ..layout.pagination import BROUGHT_FORWARD_TEXT, CARRY_FORWARD_TEXT, paginate_with_totals
from .canvas_utils import (
    FONT,
    FONT_BOLD,
    Column,
    draw_banner,
    draw_label_value,
    draw_table_header,
    draw_table_row,
    fmt_amount,
    fmt_dimension,
    fmt_quantity,
    row_height,
    wrap_text,
)

logger = logging.getLogger(__name__)

MODES = ("detailed", "abstract")

MARGIN = 30
BOTTOM_MARGIN = 40

DETAILED_COLUMNS = [
    Column("Sl", 28, "center"),
    Column("Description", 175),
    Column("Nos", 30, "right"),
    Column("L", 36, "right"),
    Column("B", 36, "right"),
    Column("D", 36, "right"),
    Column("Qty", 45, "right"),
    Column("Unit", 32, "center"),
    Column("Rate", 55, "right"),
    Column("Amount", 62, "right"),
]

ABSTRACT_COLUMNS = [
    Column("Sl", 28, "center"),
    Column("Sch. Pg", 40, "center"),
    Column("Description", 230),
    Column("Qty", 55, "right"),
    Column("Unit", 37, "center"),
    Column("Rate", 70, "right"),
    Column("Amount", 75, "right"),
]


def _detailed_rows(item: EstimateLineItem) -> List[List[str]]:
    rows = []
    if item.shows_dimensions and not item.has_measurements:
        rows.append([
            str(item.sl_no), item.description,
            fmt_dimension(item.nos), fmt_dimension(item.length),
            fmt_dimension(item.breadth), fmt_dimension(item.depth),
            fmt_quantity(item.quantity), item.unit,
            fmt_amount(item.rate), fmt_amount(item.amount),
        ])
        return rows

    # Parent row: dimensions suppressed, totals shown
    rows.append([
        str(item.sl_no), item.description, "", "", "", "",
        fmt_quantity(item.quantity), item.unit,
        fmt_amount(item.rate) if not item.has_sub_items else "",
        fmt_amount(item.amount),
    ])

    for m in item.measurements:
        rows.append([
            "", f"  {m.description}",
            fmt_dimension(m.nos), fmt_dimension(m.length),
            fmt_dimension(m.breadth), fmt_dimension(m.depth),
            fmt_quantity(m.quantity), "", "", "",
        ])

    for index, sub in enumerate(item.sub_items):
        rows.append([
            sub_item_label(index), f"  {sub.description}", "", "", "", "",
            fmt_quantity(sub.quantity), sub.unit,
            fmt_amount(sub.rate), fmt_amount(sub.amount),
        ])
        for m in sub.measurements:
            rows.append([
                "", f"    {m.description}",
                fmt_dimension(m.nos), fmt_dimension(m.length),
                fmt_dimension(m.breadth), fmt_dimension(m.depth),
                fmt_quantity(m.quantity), "", "", "",
            ])
    return rows


def _abstract_row(item: EstimateLineItem) -> List[str]:
    return [
        str(item.sl_no), item.schedule_page_no, item.description,
        fmt_quantity(item.quantity), item.unit,
        fmt_amount(item.rate), fmt_amount(item.amount),
    ]


def _forward_row(columns, text_column: int, text: str, amount: Optional[float]) -> List[str]:
    row = [""] * len(columns)
    row[text_column] = text
    row[-1] = fmt_amount(amount)
    return row


def _draw_header(c, document: EstimateDocument, mode: str, width: float, height: float, agency: str) -> float:
    title = "DETAILED ESTIMATE" if mode == "detailed" else "ABSTRACT OF ESTIMATE"
    y = draw_banner(c, title, agency, width, height)

    project = document.project
    draw_label_value(c, "Name of Work:", project.project_name, MARGIN, y)
    draw_label_value(c, "Work Code:", project.project_code, MARGIN + 330, y, label_width=65)
    y -= 14
    draw_label_value(c, "Location:", project.location, MARGIN, y)
    draw_label_value(c, "Fund:", project.fund, MARGIN + 330, y, label_width=65)
    y -= 20
    return y


def _draw_totals(c, totals: DocumentTotals, gst_percent: float, lwc_percent: float, x: float, y: float) -> float:
    lines = [
        ("Total (itemwise)", totals.itemwise_total),
        (f"Add GST @ {gst_percent:g}%", totals.gst_amount),
        ("Cost excluding LWC", totals.cost_excl_lwc),
        (f"Add LWC @ {lwc_percent:g}%", totals.lwc_amount),
        ("Cost including LWC", totals.cost_incl_lwc),
        ("Add Contingency", totals.contingency),
        ("Grand Total", totals.grand_total),
        ("Say", float(totals.rounded_grand_total)),
    ]

    for label, value in lines:
        bold = label in ("Grand Total", "Say")
        c.setFont(FONT_BOLD if bold else FONT, 9)
        c.drawRightString(x + 380, y, label)
        c.drawRightString(x + 520, y, fmt_amount(value))
        y -= 13

    y -= 6
    c.setFont(FONT_BOLD, 9)
    for line in wrap_text(f"({rupees_in_words(totals.rounded_grand_total)})", FONT_BOLD, 9, 520):
        c.drawString(x, y, line)
        y -= 12
    return y


def _continue_page(c, document: EstimateDocument, mode: str, columns, wrap_column: int, y: float,
                   running: float, width: float, height: float, agency: str) -> float:
    """Carry the running amount over to a fresh page; returns the y for the next row."""
    y = draw_table_row(c, columns, _forward_row(columns, wrap_column, CARRY_FORWARD_TEXT, running),
                       MARGIN, y, bold=True)
    c.showPage()
    y = _draw_header(c, document, mode, width, height, agency)
    y = draw_table_header(c, columns, MARGIN, y)
    return draw_table_row(c, columns, _forward_row(columns, wrap_column, BROUGHT_FORWARD_TEXT, running),
                          MARGIN, y, bold=True)


def render_estimate_pdf(
    document: EstimateDocument,
    totals: DocumentTotals,
    mode: str = "detailed",
    items_per_page: int = 12,
    gst_percent: float = 18.0,
    lwc_percent: float = 1.0,
    agency: str = "Gram Panchayat",
) -> bytes:
    """
    Render an estimate sheet.

    Args:
        document: Recomputed estimate (see recompute_document)
        totals: Totals for the same document
        mode: 'detailed' or 'abstract'
        items_per_page: Line items per page

    Returns:
        PDF bytes
    """
    if mode not in MODES:
        raise ValidationError(f"unknown estimate mode {mode!r}", "mode")

    columns = DETAILED_COLUMNS if mode == "detailed" else ABSTRACT_COLUMNS
    wrap_column = 1 if mode == "detailed" else 2

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    blocks = paginate_with_totals(document.items, items_per_page)
    if not blocks:
        y = _draw_header(c, document, mode, width, height, agency)
        y = draw_table_header(c, columns, MARGIN, y)
        y -= 20
        _draw_totals(c, totals, gst_percent, lwc_percent, MARGIN, y)
        c.showPage()

    pages = 0
    for block in blocks:
        y = _draw_header(c, document, mode, width, height, agency)
        y = draw_table_header(c, columns, MARGIN, y)
        pages += 1

        running = block.brought_forward_amount or 0.0
        if block.brought_forward:
            y = draw_table_row(c, columns, _forward_row(columns, wrap_column, BROUGHT_FORWARD_TEXT, running),
                               MARGIN, y, bold=True)

        # Rows that would run past the bottom margin go to a continuation page
        forward_height = row_height(columns, _forward_row(columns, wrap_column, CARRY_FORWARD_TEXT, 0.0),
                                    wrap_column=wrap_column, bold=True)
        floor = BOTTOM_MARGIN + forward_height
        page_has_items = False

        for item in block.items:
            rows = _detailed_rows(item) if mode == "detailed" else [_abstract_row(item)]
            heights = [row_height(columns, row, wrap_column=wrap_column) for row in rows]
            for index, row in enumerate(rows):
                keep_together = sum(heights) if index == 0 else heights[index]
                if page_has_items and y - keep_together < floor:
                    y = _continue_page(c, document, mode, columns, wrap_column, y, running,
                                       width, height, agency)
                    pages += 1
                    page_has_items = False
                y = draw_table_row(c, columns, row, MARGIN, y, wrap_column=wrap_column)
                page_has_items = True
                if index == 0:
                    running = round_currency(running + item.amount)

        if block.carry_forward:
            draw_table_row(c, columns, _forward_row(columns, wrap_column, CARRY_FORWARD_TEXT, block.carry_forward_amount),
                           MARGIN, y, bold=True)
        else:
            y -= 20
            if y < BOTTOM_MARGIN + 130:
                c.showPage()
                y = height - MARGIN - 20
                pages += 1
            _draw_totals(c, totals, gst_percent, lwc_percent, MARGIN, y)

        c.showPage()

    c.save()
    pdf = buffer.getvalue()
    logger.info(f"Estimate PDF ({mode}): {len(document.items)} items, {max(pages, 1)} pages")
    return pdf
