"""
Tests for fixed-capacity pagination and booklet imposition.
"""

from dataclasses import dataclass

import pytest

from gpworks.errors import ValidationError
from gpworks.layout.booklet import (
    apply_page_numbers,
    half_sheet_scale,
    impose_booklet,
    padded_page_count,
    plan_booklet,
)
from gpworks.layout.pagination import paginate, paginate_with_totals


@dataclass
class Row:
    name: str
    amount: float


class TestPaginate:

    def test_chunks_in_order(self):
        blocks = paginate(list(range(25)), 12)
        assert [len(b.items) for b in blocks] == [12, 12, 1]
        assert [x for b in blocks for x in b.items] == list(range(25))

    def test_serials_continue_across_pages(self):
        blocks = paginate(list("abcdefghijklmnopqrstuvwxy"), 12)
        assert [b.first_serial for b in blocks] == [1, 13, 25]
        assert blocks[1].serials()[0] == 13
        assert blocks[1].last_serial == 24
        assert blocks[2].numbered() == [(25, "y")]

    def test_forward_markers(self):
        blocks = paginate(list(range(30)), 10)
        assert [b.brought_forward for b in blocks] == [False, True, True]
        assert [b.carry_forward for b in blocks] == [True, True, False]

    def test_single_page_has_no_markers(self):
        blocks = paginate([1, 2, 3], 10)
        assert len(blocks) == 1
        assert not blocks[0].brought_forward
        assert not blocks[0].carry_forward

    def test_exact_multiple(self):
        blocks = paginate(list(range(20)), 10)
        assert [len(b.items) for b in blocks] == [10, 10]

    @pytest.mark.parametrize("capacity", [1, 2, 3, 7, 8, 50])
    def test_flattening_restores_items(self, capacity):
        items = [f"item-{i}" for i in range(7)]
        blocks = paginate(items, capacity)
        assert [x for b in blocks for x in b.items] == items
        assert all(len(b.items) <= capacity for b in blocks)

    def test_empty_gives_no_pages(self):
        assert paginate([], 12) == []

    @pytest.mark.parametrize("capacity", [1, 2, 7, 8])
    def test_empty_gives_no_pages_for_any_capacity(self, capacity):
        assert paginate([], capacity) == []

    @pytest.mark.parametrize("capacity", [0, -3, 2.5, True, "12"])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(ValidationError) as exc:
            paginate([1, 2], capacity)
        assert exc.value.field == "capacity"

    def test_running_amounts(self):
        rows = [Row(f"r{i}", 100.0) for i in range(5)]
        blocks = paginate_with_totals(rows, 2)
        assert [b.page_total for b in blocks] == [200.0, 200.0, 100.0]
        assert [b.brought_forward_amount for b in blocks] == [None, 200.0, 400.0]
        assert [b.carry_forward_amount for b in blocks] == [200.0, 400.0, None]

    def test_running_amounts_custom_accessor(self):
        blocks = paginate_with_totals([{"amt": 1.25}, {"amt": 2.5}], 1, amount_of=lambda r: r["amt"])
        assert blocks[0].carry_forward_amount == 1.25
        assert blocks[1].brought_forward_amount == 1.25


class TestBookletPlan:

    @pytest.mark.parametrize("pages,padded", [(0, 0), (1, 4), (4, 4), (5, 8), (8, 8), (9, 12)])
    def test_padding(self, pages, padded):
        assert padded_page_count(pages) == padded

    def test_eight_page_layout(self):
        sheets = plan_booklet(8)
        assert [(s.left_page, s.right_page) for s in sheets] == [(7, 0), (1, 6), (5, 2), (3, 4)]
        assert [s.sheet_index for s in sheets] == [0, 1, 2, 3]

    def test_five_pages_padded_to_eight(self):
        sheets = plan_booklet(5)
        assert len(sheets) == 4
        assert sheets[0].left_page == 7

    def test_every_page_placed_once(self):
        sheets = plan_booklet(12)
        placed = sorted(p for s in sheets for p in (s.left_page, s.right_page))
        assert placed == list(range(12))

    def test_zero_pages(self):
        assert plan_booklet(0) == []

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            plan_booklet(-1)

    def test_half_sheet_scale_a4(self):
        width, height = 595.0, 842.0
        scale = half_sheet_scale(width, height)
        assert scale == pytest.approx(min((height / 2) / width, width / height))
        assert width * scale <= height / 2 + 1e-9
        assert height * scale <= width + 1e-9

    def test_half_sheet_scale_rejects_empty_page(self):
        with pytest.raises(ValidationError):
            half_sheet_scale(0, 842)


class TestBookletImposition:
    """PyMuPDF imposition of real PDFs."""

    @pytest.fixture
    def fitz(self):
        return pytest.importorskip("fitz")

    @pytest.fixture
    def five_page_pdf(self, fitz):
        doc = fitz.open()
        for i in range(5):
            page = doc.new_page(width=595, height=842)
            page.insert_text((72, 72), f"Logical page {i + 1}")
        data = doc.tobytes()
        doc.close()
        return data

    def test_sheet_count_and_orientation(self, fitz, five_page_pdf):
        booklet = fitz.open(stream=impose_booklet(five_page_pdf), filetype="pdf")
        assert booklet.page_count == 4
        for page in booklet:
            assert page.rect.width == pytest.approx(842)
            assert page.rect.height == pytest.approx(595)
        booklet.close()

    def test_first_sheet_carries_page_one_on_the_right(self, fitz, five_page_pdf):
        booklet = fitz.open(stream=impose_booklet(five_page_pdf), filetype="pdf")
        first = booklet[0]
        right_half = fitz.Rect(first.rect.width / 2, 0, first.rect.width, first.rect.height)
        assert "Logical page 1" in first.get_text(clip=right_half)
        booklet.close()

    def test_empty_input(self):
        assert impose_booklet(b"") == b""

    def test_page_numbers(self, fitz, five_page_pdf):
        numbered = fitz.open(stream=apply_page_numbers(five_page_pdf), filetype="pdf")
        assert numbered.page_count == 5
        assert "Page 1 of 5" in numbered[0].get_text()
        assert "Page 5 of 5" in numbered[4].get_text()
        numbered.close()
