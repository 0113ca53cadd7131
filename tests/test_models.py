"""Tests for core.domain.models: locations, packages and responses."""

import pytest
from pydantic import ValidationError

from core.domain.models import Credentials, Location, Package, RateEstimate
from core.domain.units import GRAMS_PER_OUNCE, UnitSystem


class TestLocation:

    def test_country_is_upper_cased(self):
        assert Location(country=" ca ").country_code() == "CA"

    def test_blank_country_is_none(self):
        assert Location(country="").country is None

    def test_country_must_be_two_letters(self):
        with pytest.raises(ValidationError):
            Location(country="CAN")

    def test_residential(self):
        assert Location(address_type="residential").is_residential
        assert not Location(address_type="commercial").is_residential
        assert not Location().is_residential

    def test_locations_are_immutable(self):
        with pytest.raises(ValidationError):
            Location(city="Ottawa").city = "Toronto"


class TestPackage:

    def test_metric_build(self):
        package = Package.build(1500, (30, 20, 10), value=2500, currency="CAD")
        assert package.kilograms() == 1.5
        assert (package.length_cm, package.width_cm, package.height_cm) == (30, 20, 10)
        assert package.units is UnitSystem.METRIC
        assert package.value == 2500

    def test_imperial_build_is_stored_in_grams_and_cm(self):
        package = Package.build(8, (2, 1), units="imperial")
        assert package.grams == pytest.approx(8 * GRAMS_PER_OUNCE)
        assert package.cm("length") == pytest.approx(5.08)
        assert package.height_cm == 0
        assert package.imperial
        assert package.pounds() == pytest.approx(0.5)
        assert package.inches("width") == pytest.approx(1)

    def test_extra_options(self):
        assert Package.build(100, dry_ice=2).dry_ice_kilograms == 2.0
        assert Package.build(100).dry_ice_kilograms is None

    def test_negative_weight_is_rejected(self):
        with pytest.raises(ValidationError):
            Package.build(-1)


class TestCredentials:

    def test_credentials_are_mutable(self):
        credentials = Credentials(csp_key="k", csp_password="p")
        credentials.meter_number = "118500000"
        assert credentials.user_credentials()["meter_number"] == "118500000"


class TestRateEstimate:

    def test_price_alias(self):
        estimate = RateEstimate(
            origin=Location(country="CA"),
            destination=Location(country="US"),
            carrier="FedEx",
            service_name="FedEx Ground",
            service_code="FEDEX_GROUND",
            total_price=3836,
            currency="CAD",
        )
        assert estimate.price == 3836
        assert estimate.packages == []
