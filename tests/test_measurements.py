"""Tests for adapters.fedex.measurements: billable weight and dimensions."""

import pytest

from adapters.fedex.measurements import (
    MINIMUM_WEIGHT,
    billable_dimensions,
    billable_weight,
    round_half_up,
)
from core.domain.models import Package
from core.domain.units import UnitSystem


class TestRoundHalfUp:

    def test_rounds_halves_away_from_zero(self):
        assert round_half_up(1.5, 0) == 2.0
        assert round_half_up(2.5, 0) == 3.0
        assert round_half_up(-1.5, 0) == -2.0

    def test_default_is_three_decimals(self):
        assert round_half_up(1.23449) == 1.234
        assert round_half_up(1.2346) == 1.235


class TestBillableWeight:

    def test_metric_weight_is_kilograms(self):
        package = Package.build(2500)
        assert billable_weight(package, imperial=False) == 2.5

    def test_imperial_weight_is_pounds(self):
        package = Package.build(16, units=UnitSystem.IMPERIAL)
        assert billable_weight(package, imperial=True) == 1.0

    @pytest.mark.parametrize("grams", [0, 1, 40, 99])
    def test_light_parcels_are_billed_at_minimum(self, grams):
        package = Package.build(grams)
        assert billable_weight(package, imperial=False) == MINIMUM_WEIGHT

    def test_zero_ounces_is_billed_at_minimum(self):
        package = Package.build(0, units="imperial")
        assert billable_weight(package, imperial=True) == 0.1


class TestBillableDimensions:

    def test_all_zero_dimensions_are_omitted(self):
        assert billable_dimensions(Package.build(100), imperial=False) is None

    def test_dimensions_are_ceiled_to_whole_units(self):
        package = Package.build(100, (10.2, 5, 0.4))
        assert billable_dimensions(package, imperial=False) == {"length": 11, "width": 5, "height": 1}

    def test_rounding_happens_before_ceiling(self):
        # inch -> cm -> inch round trips leave float noise above the whole value
        package = Package.build(16, (10, 5, 2.0004), units="imperial")
        assert billable_dimensions(package, imperial=True) == {"length": 10, "width": 5, "height": 2}

    def test_metric_package_sent_in_inches(self):
        package = Package.build(100, (25.4, 2.54, 1))
        assert billable_dimensions(package, imperial=True) == {"length": 10, "width": 1, "height": 1}

    def test_single_nonzero_dimension_keeps_the_block(self):
        package = Package.build(100, (0, 0, 3))
        assert billable_dimensions(package, imperial=False) == {"length": 0, "width": 0, "height": 3}
