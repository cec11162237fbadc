"""
Document rendering (reportlab PDFs, openpyxl workbook).

Renderers consume computed estimates, MB rows and deduction results;
they never compute figures of their own.
"""

from .estimate_pdf import render_estimate_pdf
from .measurement_book_pdf import render_measurement_book
from .deduction_pdf import render_deduction_slip
from .excel_export import ExcelEstimateGenerator, export_estimate_xlsx

__all__ = [
    "render_estimate_pdf",
    "render_measurement_book",
    "render_deduction_slip",
    "ExcelEstimateGenerator",
    "export_estimate_xlsx",
]
