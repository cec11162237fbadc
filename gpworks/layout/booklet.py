"""
Booklet (saddle-stitch) re-imposition.

A measurement book is printed double-sided on landscape sheets, two
portrait pages per side, then folded down the middle. For the folded
booklet to read 1, 2, 3 ... the logical pages must be placed as:

    sheet s even: left = P - 1 - s, right = s
    sheet s odd:  left = s,         right = P - 1 - s

where P is the page count padded up to a multiple of 4. Pages are opaque
to the planner; only their count and size matter.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..errors import ValidationError

logger = logging.getLogger(__name__)

PAGES_PER_SIGNATURE = 4

_fitz = None


def _load_fitz():
    """Lazy load PyMuPDF."""
    global _fitz
    if _fitz is None:
        import fitz
        _fitz = fitz
    return _fitz


@dataclass(frozen=True)
class BookletSheet:
    """One printed sheet side: two logical pages, 0-based."""
    sheet_index: int
    left_page: int
    right_page: int


def padded_page_count(page_count: int) -> int:
    """Round a page count up to the next multiple of 4 (0 stays 0)."""
    if isinstance(page_count, bool) or not isinstance(page_count, int):
        raise ValidationError(f"page count must be an integer (got {page_count!r})", "page_count")
    if page_count < 0:
        raise ValidationError(f"page count must not be negative (got {page_count})", "page_count")
    return -(-page_count // PAGES_PER_SIGNATURE) * PAGES_PER_SIGNATURE


def plan_booklet(page_count: int) -> List[BookletSheet]:
    """
    Sheet layout for a booklet of `page_count` logical pages.

    The count is padded to a multiple of 4 first; indices at or beyond the
    real count are blank pages. Zero pages give zero sheets.
    """
    padded = padded_page_count(page_count)
    sheets = []
    for s in range(padded // 2):
        mirror = padded - 1 - s
        if s % 2 == 0:
            sheets.append(BookletSheet(sheet_index=s, left_page=mirror, right_page=s))
        else:
            sheets.append(BookletSheet(sheet_index=s, left_page=s, right_page=mirror))
    return sheets


def half_sheet_scale(page_width: float, page_height: float) -> float:
    """
    Scale that fits a portrait page into half of a landscape sheet cut
    from the same paper size, keeping the aspect ratio.
    """
    if page_width <= 0 or page_height <= 0:
        raise ValidationError("page size must be positive", "page_size")
    sheet_width, sheet_height = page_height, page_width
    return min((sheet_width / 2) / page_width, sheet_height / page_height)


def _half_rects(fitz, page_width: float, page_height: float) -> Tuple[object, object]:
    scale = half_sheet_scale(page_width, page_height)
    scaled_w = page_width * scale
    scaled_h = page_height * scale
    half_width = page_height / 2

    left = fitz.Rect(0, 0, scaled_w, scaled_h)
    right = fitz.Rect(half_width, 0, half_width + scaled_w, scaled_h)
    return left, right


def impose_document(source):
    """
    Impose an open PyMuPDF document into a new booklet document.

    The source is padded in place with blank pages the size of its last
    page.
    """
    fitz = _load_fitz()
    booklet = fitz.open()

    page_count = source.page_count
    if page_count == 0:
        logger.info("Booklet: source has no pages, nothing to impose")
        return booklet

    last_rect = source[page_count - 1].rect
    padded = padded_page_count(page_count)
    for _ in range(padded - page_count):
        source.new_page(width=last_rect.width, height=last_rect.height)

    page_width = source[0].rect.width
    page_height = source[0].rect.height
    left_rect, right_rect = _half_rects(fitz, page_width, page_height)

    for sheet in plan_booklet(page_count):
        side = booklet.new_page(width=page_height, height=page_width)
        for rect, pno in ((left_rect, sheet.left_page), (right_rect, sheet.right_page)):
            # Padding pages have no content stream and stay blank
            if source[pno].get_contents():
                side.show_pdf_page(rect, source, pno, keep_proportion=True)

    logger.info(f"Booklet: {page_count} pages -> {booklet.page_count} sheet sides")
    return booklet


def impose_booklet(pdf_bytes: bytes) -> bytes:
    """
    Re-impose a PDF for saddle-stitch printing.

    Returns the booklet PDF, or empty bytes when the source has no pages
    (a PDF file cannot hold zero pages).
    """
    if not pdf_bytes:
        return b""

    fitz = _load_fitz()
    source = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        booklet = impose_document(source)
        try:
            if booklet.page_count == 0:
                return b""
            return booklet.tobytes(garbage=3, deflate=True)
        finally:
            booklet.close()
    finally:
        source.close()


def apply_page_numbers(pdf_bytes: bytes, font_size: float = 9) -> bytes:
    """Stamp 'Page i of N' at the bottom centre of every page."""
    if not pdf_bytes:
        return b""

    fitz = _load_fitz()
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        total = doc.page_count
        if total == 0:
            return b""
        for index, page in enumerate(doc):
            width = page.rect.width
            height = page.rect.height
            page.insert_text(
                (width / 2 - 30, height - 15),
                f"Page {index + 1} of {total}",
                fontsize=font_size,
                fontname="helv",
            )
        return doc.tobytes(deflate=True)
    finally:
        doc.close()
