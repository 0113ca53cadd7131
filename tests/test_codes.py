"""Tests for adapters.fedex.codes: code tables, service names, currency."""

import pytest

from adapters.fedex.codes import (
    SERVICE_TYPES,
    carrier_code,
    dropoff_type_code,
    normalize_currency,
    package_identifier_type_code,
    package_type_code,
    payment_type_code,
    service_name_for_code,
)
from core.domain.errors import UnknownCodeError


class TestServiceNames:

    def test_known_codes_use_table_names(self):
        for code, name in SERVICE_TYPES.items():
            assert service_name_for_code(code) == name

    def test_unknown_code_is_title_cased(self):
        assert service_name_for_code("SOME_WEIRD_RATE") == "FedEx Some Weird Rate"

    def test_carrier_name_is_not_repeated(self):
        assert (
            service_name_for_code("FEDEX_EXPRESS_SAVER_SATURDAY_DELIVERY")
            == "FedEx Express Saver Saturday Delivery"
        )


class TestLookups:

    def test_domain_keys_map_to_protocol_codes(self):
        assert carrier_code("fedex_ground") == "FDXG"
        assert carrier_code("fedex_express") == "FDXE"
        assert package_type_code("fedex_10_kg_box") == "FEDEX_10KG_BOX"
        assert dropoff_type_code("dropbox") == "DROP_BOX"
        assert payment_type_code("third_party") == "THIRDPARTY"
        assert package_identifier_type_code("door_tag") == "TRACKING_NUMBER_OR_DOORTAG"

    def test_protocol_codes_pass_through(self):
        assert dropoff_type_code("REGULAR_PICKUP") == "REGULAR_PICKUP"
        assert package_type_code("YOUR_PACKAGING") == "YOUR_PACKAGING"

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownCodeError, match="packaging type"):
            package_type_code("shoebox")

    def test_unknown_code_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            payment_type_code("barter")


class TestCurrency:

    @pytest.mark.parametrize("code", ["UKL", "ukl"])
    def test_ukl_becomes_gbp(self, code):
        assert normalize_currency(code) == "GBP"

    def test_other_currencies_are_unchanged(self):
        assert normalize_currency("CAD") == "CAD"
        assert normalize_currency("") == ""
