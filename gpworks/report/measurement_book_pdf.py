"""
Measurement Book PDF

Cover page, measurement pages (fixed rows per page with Brought Forward /
Carry Forward markers and running amounts) and the completion
certificate. Pages are then stamped 'Page i of N'; the booklet option
re-imposes the result for saddle-stitch printing.
"""

import io
import logging
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..billing.words import rupees_in_words
from ..estimate.measurement_book import MBRow
from ..estimate.models import ProjectInfo
from ..estimate.quantities import round_currency, round_rupees
from ..layout.booklet import apply_page_numbers, impose_booklet
from ..layout.pagination import BROUGHT_FORWARD_TEXT, CARRY_FORWARD_TEXT, paginate_with_totals
from .canvas_utils import (
    FONT,
    FONT_BOLD,
    PRIMARY,
    Column,
    draw_label_value,
    draw_table_header,
    draw_table_row,
    fmt_amount,
    fmt_dimension,
    fmt_quantity,
    wrap_text,
)

logger = logging.getLogger(__name__)

MARGIN = 30

MB_COLUMNS = [
    Column("Sl", 28, "center"),
    Column("Particulars", 170),
    Column("Nos", 32, "right"),
    Column("L", 38, "right"),
    Column("B", 38, "right"),
    Column("D", 38, "right"),
    Column("Qty", 48, "right"),
    Column("Unit", 30, "center"),
    Column("Rate", 50, "right"),
    Column("Amount", 63, "right"),
]


def _row_values(serial: int, row: MBRow) -> List[str]:
    return [
        str(serial), row.description,
        fmt_dimension(row.nos), fmt_dimension(row.length),
        fmt_dimension(row.breadth), fmt_dimension(row.depth),
        fmt_quantity(row.quantity), row.unit,
        fmt_amount(row.rate), fmt_amount(row.amount),
    ]


def _marker_values(text: str, amount: float) -> List[str]:
    values = [""] * len(MB_COLUMNS)
    values[1] = text
    values[-1] = fmt_amount(amount)
    return values


def _draw_cover(c, project: ProjectInfo, agency: str, financial_year: str, width: float, height: float) -> None:
    c.setStrokeColor(PRIMARY)
    c.setLineWidth(2)
    c.rect(MARGIN, MARGIN, width - 2 * MARGIN, height - 2 * MARGIN, stroke=1, fill=0)
    c.setLineWidth(1)
    c.setStrokeColor(colors.black)

    c.setFillColor(PRIMARY)
    c.setFont(FONT_BOLD, 26)
    c.drawCentredString(width / 2, height - 180, "MEASUREMENT BOOK")
    c.setFillColor(colors.black)
    c.setFont(FONT, 13)
    c.drawCentredString(width / 2, height - 210, agency)
    if financial_year:
        c.drawCentredString(width / 2, height - 230, f"Financial Year {financial_year}")

    y = height - 320
    c.setFont(FONT_BOLD, 11)
    for line in wrap_text(project.project_name, FONT_BOLD, 11, width - 160):
        c.drawCentredString(width / 2, y, line)
        y -= 16

    y -= 20
    for label, value in (
        ("Work Code:", project.project_code),
        ("Location:", project.location),
        ("Fund:", project.fund),
        ("Measured by:", project.prepared_by),
        ("Date:", project.date),
    ):
        draw_label_value(c, label, value, 140, y, size=11)
        y -= 20


def _draw_page_header(c, project: ProjectInfo, height: float) -> float:
    y = height - MARGIN - 10
    c.setFont(FONT_BOLD, 11)
    c.drawString(MARGIN, y, "MEASUREMENTS")
    y -= 16
    draw_label_value(c, "Name of Work:", project.project_name, MARGIN, y, label_width=80)
    y -= 18
    return y


def _draw_certificate(c, project: ProjectInfo, total: float, width: float, height: float) -> None:
    y = height - 120
    c.setFont(FONT_BOLD, 14)
    c.drawCentredString(width / 2, y, "CERTIFICATE")
    y -= 40

    text = (
        f"Certified that the measurements recorded in this book for the work "
        f"'{project.project_name}' were taken by me and that the work has been "
        f"executed as per specification. Value of work done: Rs. {fmt_amount(total)} "
        f"({rupees_in_words(round_rupees(total))})."
    )
    c.setFont(FONT, 11)
    for line in wrap_text(text, FONT, 11, width - 2 * MARGIN - 40):
        c.drawString(MARGIN + 20, y, line)
        y -= 16

    y -= 80
    c.setFont(FONT, 10)
    c.drawString(MARGIN + 20, y, "Measured by")
    c.drawRightString(width - MARGIN - 20, y, "Checked by")
    y -= 14
    c.drawString(MARGIN + 20, y, project.prepared_by)
    c.drawRightString(width - MARGIN - 20, y, "Executive Officer")


def render_measurement_book(
    rows: List[MBRow],
    project: ProjectInfo,
    items_per_page: int = 12,
    agency: str = "Gram Panchayat",
    financial_year: str = "",
    booklet: bool = False,
) -> bytes:
    """
    Render a measurement book.

    Args:
        rows: Numbered MB rows (see estimate_to_mb / to_mb_rows)
        project: Work details for the cover and page headers
        items_per_page: Measurement rows per page
        booklet: Re-impose for saddle-stitch printing

    Returns:
        PDF bytes
    """
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    _draw_cover(c, project, agency, financial_year, width, height)
    c.showPage()

    blocks = paginate_with_totals(rows, items_per_page)
    for block in blocks:
        y = _draw_page_header(c, project, height)
        y = draw_table_header(c, MB_COLUMNS, MARGIN, y)

        if block.brought_forward:
            y = draw_table_row(c, MB_COLUMNS, _marker_values(BROUGHT_FORWARD_TEXT, block.brought_forward_amount),
                               MARGIN, y, bold=True)

        for serial, row in block.numbered():
            y = draw_table_row(c, MB_COLUMNS, _row_values(serial, row), MARGIN, y, wrap_column=1)

        if block.carry_forward:
            draw_table_row(c, MB_COLUMNS, _marker_values(CARRY_FORWARD_TEXT, block.carry_forward_amount),
                           MARGIN, y, bold=True)
        else:
            total = round_currency((block.brought_forward_amount or 0.0) + block.page_total)
            draw_table_row(c, MB_COLUMNS, _marker_values("Total", total), MARGIN, y, bold=True)

        c.showPage()

    grand_total = round_currency(sum(row.amount for row in rows))
    _draw_certificate(c, project, grand_total, width, height)
    c.showPage()
    c.save()

    pdf = apply_page_numbers(buffer.getvalue())
    logger.info(f"Measurement book: {len(rows)} rows on {len(blocks)} measurement pages")

    if booklet:
        pdf = impose_booklet(pdf)
        logger.info("Measurement book re-imposed as booklet")
    return pdf
