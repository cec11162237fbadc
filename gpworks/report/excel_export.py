"""
Excel Estimate Generator - estimate abstract and total chain in Excel format.
"""

import logging
from pathlib import Path
from typing import Union

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..billing.words import rupees_in_words
from ..estimate.models import DocumentTotals, EstimateDocument, sub_item_label

logger = logging.getLogger(__name__)

CURRENCY_FORMAT = '₹#,##,##0.00'
QUANTITY_FORMAT = '0.000'


class ExcelEstimateGenerator:
    """Generate the estimate abstract workbook."""

    def __init__(self, gst_percent: float = 18.0, lwc_percent: float = 1.0):
        self.gst_percent = gst_percent
        self.lwc_percent = lwc_percent

        self.header_font = Font(bold=True, size=11)
        self.header_fill = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")
        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

    def generate(self, output_path: Union[str, Path], document: EstimateDocument, totals: DocumentTotals) -> Path:
        """Write the workbook and return its path."""
        output_path = Path(output_path)

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Abstract"
        self._create_abstract_sheet(ws, document, totals)

        ws_detail = wb.create_sheet("Sub Items")
        self._create_sub_item_sheet(ws_detail, document)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Estimate workbook written: {output_path}")
        return output_path

    def _header_row(self, ws, row: int, headers, widths):
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.border = self.thin_border
            cell.alignment = Alignment(horizontal='center', wrap_text=True)

        for col, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

    def _create_abstract_sheet(self, ws, document: EstimateDocument, totals: DocumentTotals):
        project = document.project

        ws['A1'] = "ABSTRACT OF ESTIMATE"
        ws['A1'].font = Font(bold=True, size=14)
        ws['A2'] = f"Name of Work: {project.project_name or 'N/A'}"
        ws['A3'] = f"Location: {project.location or 'N/A'}"

        headers = ["Sl. No.", "Sch. Page", "Description", "Quantity", "Unit", "Rate (₹)", "Amount (₹)"]
        self._header_row(ws, 5, headers, [8, 10, 55, 12, 8, 14, 16])

        row = 6
        for item in document.items:
            values = [item.sl_no, item.schedule_page_no, item.description, item.quantity,
                      item.unit, item.rate, item.amount]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.thin_border
            ws.cell(row=row, column=3).alignment = Alignment(wrap_text=True)
            ws.cell(row=row, column=4).number_format = QUANTITY_FORMAT
            ws.cell(row=row, column=6).number_format = CURRENCY_FORMAT
            ws.cell(row=row, column=7).number_format = CURRENCY_FORMAT
            row += 1

        # Total chain
        row += 1
        chain = [
            ("Total (itemwise)", totals.itemwise_total),
            (f"Add GST @ {self.gst_percent:g}%", totals.gst_amount),
            ("Cost excluding LWC", totals.cost_excl_lwc),
            (f"Add LWC @ {self.lwc_percent:g}%", totals.lwc_amount),
            ("Cost including LWC", totals.cost_incl_lwc),
            ("Add Contingency", totals.contingency),
            ("GRAND TOTAL", totals.grand_total),
            ("Say", totals.rounded_grand_total),
        ]
        for label, value in chain:
            bold = label in ("GRAND TOTAL", "Say")
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=6)
            label_cell = ws.cell(row=row, column=1, value=label)
            label_cell.alignment = Alignment(horizontal='right')
            label_cell.font = Font(bold=bold)

            value_cell = ws.cell(row=row, column=7, value=value)
            value_cell.number_format = CURRENCY_FORMAT
            value_cell.border = self.thin_border
            value_cell.font = Font(bold=bold)
            row += 1

        ws.cell(row=row + 1, column=1, value=f"({rupees_in_words(totals.rounded_grand_total)})").font = Font(italic=True)

    def _create_sub_item_sheet(self, ws, document: EstimateDocument):
        ws['A1'] = "SUB ITEMS AND MEASUREMENTS"
        ws['A1'].font = Font(bold=True, size=14)

        headers = ["Item", "Description", "Nos", "L", "B", "D", "Quantity", "Unit", "Rate (₹)", "Amount (₹)"]
        self._header_row(ws, 3, headers, [8, 50, 8, 10, 10, 10, 12, 8, 14, 16])

        row = 4
        for item in document.items:
            for index, sub in enumerate(item.sub_items):
                label = f"{item.sl_no}{sub_item_label(index)}"
                values = [label, sub.description, None, None, None, None,
                          sub.quantity, sub.unit, sub.rate, sub.amount]
                for col, value in enumerate(values, 1):
                    ws.cell(row=row, column=col, value=value).border = self.thin_border
                ws.cell(row=row, column=9).number_format = CURRENCY_FORMAT
                ws.cell(row=row, column=10).number_format = CURRENCY_FORMAT
                row += 1
                row = self._measurement_rows(ws, row, sub.measurements)

            if item.measurements:
                ws.cell(row=row, column=1, value=str(item.sl_no)).border = self.thin_border
                ws.cell(row=row, column=2, value=item.description).border = self.thin_border
                row += 1
                row = self._measurement_rows(ws, row, item.measurements)

        return row

    def _measurement_rows(self, ws, row: int, measurements) -> int:
        for m in measurements:
            values = ["", f"  {m.description}", m.nos, m.length, m.breadth, m.depth, m.quantity]
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = self.thin_border
            ws.cell(row=row, column=7).number_format = QUANTITY_FORMAT
            row += 1
        return row


def export_estimate_xlsx(
    output_path: Union[str, Path],
    document: EstimateDocument,
    totals: DocumentTotals,
    gst_percent: float = 18.0,
    lwc_percent: float = 1.0,
) -> Path:
    return ExcelEstimateGenerator(gst_percent, lwc_percent).generate(output_path, document, totals)
