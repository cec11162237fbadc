"""
Shared reportlab canvas helpers for the fixed-layout documents.

Coordinates are reportlab points with the origin at the bottom-left.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.pdfbase.pdfmetrics import stringWidth

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

PRIMARY = colors.Color(0.12, 0.29, 0.49)
ACCENT = colors.Color(0.0, 0.47, 0.75)
LIGHT_BG = colors.Color(0.95, 0.97, 1.0)
GRID = colors.Color(0.6, 0.6, 0.6)


@dataclass
class Column:
    """A table column: title, width in points, alignment."""
    title: str
    width: float
    align: str = "left"  # left, right, center


def fmt_amount(value: Optional[float]) -> str:
    """Indian-style currency, 2 decimals: 1234567.5 -> 12,34,567.50"""
    if value is None:
        return ""
    negative = value < 0
    whole, fraction = f"{abs(value):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{'-' if negative else ''}{whole}.{fraction}"


def fmt_quantity(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:.3f}"


def fmt_dimension(value: Optional[float]) -> str:
    if not value:
        return ""
    return f"{value:.2f}"


def wrap_text(text: str, font: str, size: float, max_width: float) -> List[str]:
    """Greedy word wrap by rendered width."""
    words = (text or "").split()
    if not words:
        return [""]

    lines = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if stringWidth(candidate, font, size) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def draw_cell_text(c, text: str, x: float, y: float, width: float, align: str = "left",
                   font: str = FONT, size: float = 8, padding: float = 3) -> None:
    c.setFont(font, size)
    if align == "right":
        c.drawRightString(x + width - padding, y, text)
    elif align == "center":
        c.drawCentredString(x + width / 2, y, text)
    else:
        c.drawString(x + padding, y, text)


def draw_table_header(c, columns: Sequence[Column], x: float, y: float, height: float = 16,
                      size: float = 8) -> float:
    """Draw a filled header row; returns the y below it."""
    total_width = sum(col.width for col in columns)
    c.setFillColor(PRIMARY)
    c.rect(x, y - height, total_width, height, stroke=0, fill=1)
    c.setFillColor(colors.white)

    cursor = x
    for col in columns:
        draw_cell_text(c, col.title, cursor, y - height + 5, col.width, "center", FONT_BOLD, size)
        cursor += col.width

    c.setFillColor(colors.black)
    return y - height


def row_height(columns: Sequence[Column], values: Sequence[str], size: float = 8,
               wrap_column: Optional[int] = None, bold: bool = False, line_height: float = 10) -> float:
    """Height draw_table_row() will use for these values."""
    lines = 1
    if wrap_column is not None:
        font = FONT_BOLD if bold else FONT
        lines = len(wrap_text(str(values[wrap_column]), font, size, columns[wrap_column].width - 6))
    return lines * line_height + 4


def draw_table_row(c, columns: Sequence[Column], values: Sequence[str], x: float, y: float,
                   size: float = 8, wrap_column: Optional[int] = None, bold: bool = False,
                   line_height: float = 10) -> float:
    """
    Draw one bordered row; the wrap_column's text may take several lines.

    Returns the y below the row.
    """
    font = FONT_BOLD if bold else FONT
    wrapped = [str(v) for v in values]
    lines = 1
    if wrap_column is not None:
        col = columns[wrap_column]
        wrapped_lines = wrap_text(wrapped[wrap_column], font, size, col.width - 6)
        lines = len(wrapped_lines)
    height = lines * line_height + 4

    c.setStrokeColor(GRID)
    cursor = x
    for index, col in enumerate(columns):
        c.rect(cursor, y - height, col.width, height, stroke=1, fill=0)
        if index == wrap_column:
            line_y = y - line_height + 1
            for line in wrapped_lines:
                draw_cell_text(c, line, cursor, line_y, col.width, col.align, font, size)
                line_y -= line_height
        else:
            draw_cell_text(c, wrapped[index], cursor, y - line_height + 1, col.width, col.align, font, size)
        cursor += col.width

    c.setStrokeColor(colors.black)
    return y - height


def draw_banner(c, title: str, subtitle: str, width: float, height: float, band: float = 70) -> float:
    """Coloured title band across the top of the page; returns y below it."""
    c.setFillColor(PRIMARY)
    c.rect(0, height - band, width, band, stroke=0, fill=1)
    c.setFillColor(colors.white)
    c.setFont(FONT_BOLD, 18)
    c.drawString(40, height - 35, title)
    c.setFont(FONT, 10)
    c.drawString(40, height - 55, subtitle)
    c.setFillColor(colors.black)
    return height - band - 15


def draw_label_value(c, label: str, value: str, x: float, y: float, label_width: float = 110,
                     size: float = 9) -> None:
    c.setFont(FONT_BOLD, size)
    c.drawString(x, y, label)
    c.setFont(FONT, size)
    c.drawString(x + label_width, y, value or "")
