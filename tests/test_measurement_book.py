"""
Tests for measurement book rows built from entries and from estimates.
"""

import pytest

from gpworks.errors import ValidationError
from gpworks.estimate.measurement_book import (
    MBEntry,
    estimate_to_mb,
    line_items_to_mb_entries,
    to_mb_rows,
)
from gpworks.estimate.models import EstimateLineItem
from gpworks.estimate.quantities import compute_document_totals, compute_items


class TestToMBRows:

    def test_quantity_and_amount_derived(self):
        rows = to_mb_rows([MBEntry("Earth work", length=10, breadth=2, depth=0.5, rate=100)])
        row = rows[0]
        assert row.sl_no == 1
        assert row.nos == 1.0
        assert row.quantity == 10.0
        assert row.amount == 1000.0
        assert row.unit == "cum"

    def test_no_dimensions_keeps_zero_quantity(self):
        rows = to_mb_rows([MBEntry("Lump sum", rate=100)])
        assert rows[0].quantity == 0.0
        assert rows[0].amount == 0.0

    def test_entered_quantity_priced(self):
        rows = to_mb_rows([MBEntry("Pipes", quantity=3, unit="nos", rate=10)])
        assert rows[0].quantity == 3.0
        assert rows[0].amount == 30.0

    def test_entered_amount_kept(self):
        rows = to_mb_rows([MBEntry("Carriage", quantity=3, rate=10, amount=55)])
        assert rows[0].amount == 55.0

    def test_serials_continuous(self):
        rows = to_mb_rows([MBEntry(f"Row {i}", quantity=1, rate=1) for i in range(5)])
        assert [r.sl_no for r in rows] == [1, 2, 3, 4, 5]

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            to_mb_rows([MBEntry("Bad", length=-1)])

    def test_empty(self):
        assert to_mb_rows([]) == []


class TestEstimateToMB:

    def test_flattens_measurements_and_sub_items(self, sample_items):
        entries = line_items_to_mb_entries(compute_items(sample_items))
        descriptions = [e.description for e in entries]
        assert descriptions == [
            "Earth work in excavation - Main trench",
            "Earth work in excavation - Side trench",
            "(2a) First class bricks",
            "(2b) Picked jhama bricks",
            "Supply of hume pipes",
        ]

    def test_rows_add_up_to_itemwise_total(self, sample_items):
        rows = estimate_to_mb(compute_items(sample_items))
        assert [r.amount for r in rows] == [750.0, 750.0, 20.0, 15.0, 1000.0]
        assert sum(r.amount for r in rows) == compute_document_totals(sample_items).itemwise_total
        assert [r.sl_no for r in rows] == [1, 2, 3, 4, 5]

    def test_zero_quantity_item_stays_zero(self):
        """Filled-in dimensions do not give a quantity the estimate never had."""
        item = EstimateLineItem(sl_no=1, description="Kerb line", unit="m", rate=10, length=5)
        computed = compute_items([item])
        assert computed[0].quantity == 0.0

        rows = estimate_to_mb(computed)
        assert rows[0].quantity == 0.0
        assert rows[0].amount == computed[0].amount == 0.0

        # The same entry typed into the MB form is derived from its length
        raw = to_mb_rows(line_items_to_mb_entries(computed))
        assert raw[0].quantity == 5.0
