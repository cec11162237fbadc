"""
Bill deduction slip PDF.

    Gross bill amount
    Less Income Tax @ x%
    Less GST TDS @ y%  (CGST y/2% + SGST y/2%)
    Less Labour Welfare Cess @ z%
    Less Security Deposit @ s%
    Total deduction / Net payable (in figures and words)
"""

import io
import logging

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..billing.deductions import DeductionResult
from ..billing.schema import BillInfo
from ..billing.words import rupees_in_words
from ..estimate.quantities import round_rupees
from .canvas_utils import (
    FONT,
    FONT_BOLD,
    Column,
    draw_banner,
    draw_label_value,
    draw_table_header,
    draw_table_row,
    fmt_amount,
    wrap_text,
)

logger = logging.getLogger(__name__)

MARGIN = 40

SLIP_COLUMNS = [
    Column("Particulars", 300),
    Column("Rate", 80, "right"),
    Column("Amount (Rs.)", 135, "right"),
]


def _pct(value: float) -> str:
    return f"{value:g}%"


def render_deduction_slip(result: DeductionResult, info: BillInfo, agency: str = "Gram Panchayat") -> bytes:
    """Render one bill's deduction slip. Returns PDF bytes."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    y = draw_banner(c, "BILL DEDUCTION STATEMENT", info.agency or agency, width, height)

    draw_label_value(c, "Name of Work:", info.work_name, MARGIN, y)
    y -= 14
    draw_label_value(c, "Contractor:", info.contractor, MARGIN, y)
    y -= 14
    bill_label = f"{info.bill_number} ({'Final' if info.is_final_bill else info.bill_type})"
    draw_label_value(c, "Bill No.:", bill_label, MARGIN, y)
    draw_label_value(c, "Date:", info.date, MARGIN + 330, y, label_width=40)
    y -= 24

    rates = result.rates
    half_gst = rates.gst_tds / 2
    rows = [
        (["Gross Bill Amount", "", fmt_amount(result.gross)], True),
        (["Less Income Tax", _pct(rates.income_tax), fmt_amount(result.income_tax_amount)], False),
        (["Less GST TDS", _pct(rates.gst_tds), fmt_amount(result.gst_tds_amount)], False),
        (["    CGST", _pct(half_gst), fmt_amount(result.cgst_amount)], False),
        (["    SGST", _pct(half_gst), fmt_amount(result.sgst_amount)], False),
        (["Less Labour Welfare Cess", _pct(rates.labour_cess), fmt_amount(result.labour_cess_amount)], False),
        (["Less Security Deposit", _pct(rates.security_deposit), fmt_amount(result.security_deposit_amount)], False),
        (["Total Deduction", "", fmt_amount(result.total_deduction)], True),
        (["Net Payable", "", fmt_amount(result.net_payable)], True),
    ]

    y = draw_table_header(c, SLIP_COLUMNS, MARGIN, y, size=9)
    for values, bold in rows:
        y = draw_table_row(c, SLIP_COLUMNS, values, MARGIN, y, size=9, bold=bold, line_height=12)

    y -= 20
    c.setFont(FONT_BOLD, 10)
    words = f"Net payable: {rupees_in_words(round_rupees(result.net_payable))}"
    for line in wrap_text(words, FONT_BOLD, 10, width - 2 * MARGIN):
        c.drawString(MARGIN, y, line)
        y -= 14

    y -= 90
    c.setFont(FONT, 10)
    c.drawString(MARGIN, y, "Prepared by")
    c.drawCentredString(width / 2, y, "Verified by")
    c.drawRightString(width - MARGIN, y, "Executive Officer")

    c.showPage()
    c.save()
    logger.info(f"Deduction slip for bill {info.bill_number or '-'}: net {result.net_payable:.2f}")
    return buffer.getvalue()
