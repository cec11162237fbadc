"""
Tests for unit classification, road dimensions and drain master parameters.
"""

from dataclasses import replace

import pytest

from gpworks.errors import ValidationError
from gpworks.estimate.dimensions import apply_global_dimensions, quantity_from_dimensions
from gpworks.estimate.drain import DrainParams, apply_drain_params, derive_drain_params
from gpworks.estimate.models import EstimateLineItem, Measurement, SubItem
from gpworks.estimate.units import UnitKind, is_dimensional, unit_kind


class TestUnits:

    @pytest.mark.parametrize("unit,kind", [
        ("Cum", UnitKind.VOLUME),
        (" sqm ", UnitKind.AREA),
        ("RM", UnitKind.LENGTH),
        ("Nos", UnitKind.COUNT),
        ("L.S", UnitKind.LUMPSUM),
        ("Quintal", UnitKind.MASS),
    ])
    def test_known_units(self, unit, kind):
        assert unit_kind(unit) == kind

    def test_unknown_unit(self):
        with pytest.raises(ValidationError):
            unit_kind("furlong")

    def test_empty_unit(self):
        with pytest.raises(ValidationError) as exc:
            unit_kind("  ")
        assert exc.value.field == "unit"

    def test_is_dimensional(self):
        assert is_dimensional("cum")
        assert is_dimensional("sqm")
        assert not is_dimensional("nos")


class TestQuantityFromDimensions:
    """Unit decides which dimensions enter the product."""

    def test_length_unit(self):
        assert quantity_from_dimensions("m", 2, 5, 3, 1) == 10.0

    def test_area_unit_ignores_depth(self):
        assert quantity_from_dimensions("sqm", 1, 10, 3, 0.5) == 30.0

    def test_volume_unit(self):
        assert quantity_from_dimensions("cum", 1, 10, 3, 0.5) == 15.0

    def test_count_unit(self):
        assert quantity_from_dimensions("nos", 4, 10, 3, 0.5) == 4.0

    def test_other_units_use_full_product(self):
        assert quantity_from_dimensions("ls", 1, 2, 3, 4) == 24.0

    def test_zero_dimension_gives_zero(self):
        """Unlike a measurement row, a missing dimension is not taken as 1."""
        assert quantity_from_dimensions("cum", 1, 10, 3, 0) == 0.0

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            quantity_from_dimensions("cum", 1, -10, 3, 1)


class TestGlobalDimensions:
    """apply_global_dimensions for road estimates"""

    @pytest.fixture
    def road_items(self):
        return [
            EstimateLineItem(sl_no=1, description="Sub base", unit="cum", rate=100),
            EstimateLineItem(sl_no=2, description="Surface dressing", unit="sqm", rate=10, depth=0.3),
            EstimateLineItem(sl_no=3, description="Sign boards", unit="nos", rate=500, quantity=2),
            EstimateLineItem(
                sl_no=4, description="Measured patch", unit="cum", rate=100,
                measurements=[Measurement(nos=1, length=2, breadth=2, depth=0.1)],
            ),
            EstimateLineItem(
                sl_no=5, description="Earth work", unit="cum",
                sub_items=[SubItem(description="Ordinary soil", unit="cum", rate=50, quantity=7)],
            ),
        ]

    def test_volume_item_rederived(self, road_items):
        items = apply_global_dimensions(road_items, 100, 3.75, 0.2)
        assert items[0].quantity == pytest.approx(75.0)
        assert items[0].amount == pytest.approx(7500.0)
        assert (items[0].length, items[0].breadth, items[0].depth) == (100, 3.75, 0.2)

    def test_area_item_gets_zero_depth(self, road_items):
        items = apply_global_dimensions(road_items, 100, 3.75, 0.2)
        assert items[1].depth == 0.0
        assert items[1].quantity == pytest.approx(375.0)

    def test_count_and_measured_items_untouched(self, road_items):
        items = apply_global_dimensions(road_items, 100, 3.75, 0.2)
        assert items[2] is road_items[2]
        assert items[3] is road_items[3]

    def test_unknown_unit_rejected(self, road_items):
        road_items[3] = replace(road_items[3], unit="furlong")
        with pytest.raises(ValidationError):
            apply_global_dimensions(road_items, 100, 3.75, 0.2)

    def test_sub_item_parent_keeps_sum(self, road_items):
        items = apply_global_dimensions(road_items, 100, 3.75, 0.2)
        parent = items[4]
        assert parent.length == 100
        assert parent.quantity == 7.0
        assert parent.amount == 350.0

    def test_input_not_mutated(self, road_items):
        apply_global_dimensions(road_items, 100, 3.75, 0.2)
        assert road_items[0].length == 0.0
        assert road_items[0].quantity == 0.0


class TestDrainParams:
    """Drain master parameter derivations"""

    def test_derived_values(self):
        params = derive_drain_params(DrainParams(length_of_drain=30))
        assert params.depth_ds == 0.5
        assert params.avg_depth_earth_cutting == 0.45
        assert params.avg_depth_brick_work == 0.45
        assert params.width_earth_cutting == 1.05

    def test_defaults(self):
        params = DrainParams()
        assert params.clear_width_of_drain == 0.3
        assert params.depth_us == 0.4

    def test_negative_rejected(self):
        with pytest.raises(ValidationError) as exc:
            derive_drain_params(DrainParams(length_of_drain=-5))
        assert exc.value.field == "length_of_drain"

    def test_unknown_param_key(self):
        with pytest.raises(ValidationError):
            DrainParams().get("height")

    def test_linked_item_rederived(self):
        item = EstimateLineItem(
            sl_no=1, description="Earth work in trench", unit="cum", rate=100,
            length_param="length_of_drain",
            breadth_param="width_earth_cutting",
            depth_param="avg_depth_earth_cutting",
        )
        other = EstimateLineItem(sl_no=2, description="Pipes", unit="nos", rate=10, quantity=3)

        items = apply_drain_params([item, other], DrainParams(length_of_drain=30))
        assert items[0].length == 30
        assert items[0].breadth == 1.05
        assert items[0].depth == 0.45
        assert items[0].quantity == pytest.approx(14.175)
        assert items[0].amount == pytest.approx(1417.5)
        assert items[1] is other

    def test_linked_length_item_untouched(self):
        """Only area and volume items are re-derived from drain parameters."""
        item = EstimateLineItem(
            sl_no=1, description="Drain cover", unit="m", rate=40, quantity=8,
            length_param="length_of_drain",
        )
        items = apply_drain_params([item], DrainParams(length_of_drain=30))
        assert items[0] is item

    def test_zero_param_falls_back_to_item_dimension(self):
        item = EstimateLineItem(
            sl_no=1, description="Brick work", unit="cum", rate=10,
            length=12, breadth=0.25, depth=0.4,
            length_param="length_of_drain",
        )
        items = apply_drain_params([item], DrainParams(length_of_drain=0))
        assert items[0].length == 12
        assert items[0].quantity == pytest.approx(1.2)
