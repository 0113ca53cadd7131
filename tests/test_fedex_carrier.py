"""Tests for core.services.fedex_carrier: operation sequencing and credential state."""

import pytest

from adapters.fedex.xml_tree import child_text, parse_document
from conftest import FakeTransport, load_fixture
from core.config import AppSettings
from core.domain.errors import MissingCredentialsError
from core.domain.models import Credentials, Package
from core.domain.options import RateOptions
from core.services.fedex_carrier import FedExCarrier


@pytest.fixture
def carrier_for(credentials, client_identity):
    def build(*replies, test=True):
        transport = FakeTransport(*replies)
        carrier = FedExCarrier(credentials, transport=transport, client=client_identity, test=test)
        return carrier, transport

    return build


class TestConstruction:

    @pytest.mark.parametrize(
        "values",
        [{}, {"csp_key": "999999999"}, {"csp_password": "7777777"}],
    )
    def test_provider_key_and_password_are_required(self, values):
        with pytest.raises(MissingCredentialsError):
            FedExCarrier(Credentials(**values), transport=FakeTransport())

    def test_provider_credentials_are_enough(self):
        carrier = FedExCarrier(Credentials(csp_key="999999999", csp_password="7777777"), transport=FakeTransport())
        assert carrier.user_credentials() == {
            "account_number": None,
            "meter_number": None,
            "user_key": None,
            "user_password": None,
        }
        assert carrier.name == "FedEx"

    def test_from_settings(self):
        settings = AppSettings(
            _env_file=None,
            csp_key="k",
            csp_password="p",
            account_number="3333",
            client_product_id="ABCD",
            client_region="US",
            test_mode=True,
            customer_transaction_id="shop-1",
        )
        carrier = FedExCarrier.from_settings(settings, transport=FakeTransport())
        assert carrier.credentials.account_number == "3333"
        assert carrier.client.product_id == "ABCD"
        assert carrier.client.region == "US"
        assert carrier.test is True
        assert carrier.customer_transaction_id == "shop-1"


class TestRegistration:

    def test_successful_registration_updates_credentials(self, carrier_for):
        carrier, transport = carrier_for(load_fixture("registration_reply"))
        response = carrier.register()

        assert response.success
        assert carrier.credentials.user_key == "Generated USER KEY"
        assert carrier.user_credentials()["user_password"] == "Generated USER PWD"
        assert response.request == transport.requests[0][0] == carrier.last_request
        assert transport.requests[0][1] is True
        assert response.test is True

    def test_failed_registration_keeps_credentials(self, carrier_for):
        carrier, _ = carrier_for(load_fixture("registration_error_reply"))
        response = carrier.register()
        assert not response.success
        assert carrier.credentials.user_key == "5555"

    def test_subscription_updates_meter_used_by_later_requests(self, carrier_for, ottawa, beverly_hills):
        carrier, transport = carrier_for(load_fixture("subscription_reply"), load_fixture("rate_reply"))
        response = carrier.subscribe()
        assert response.success
        assert carrier.credentials.meter_number == "Generated Meter Number"

        carrier.find_rates(ottawa, beverly_hills, Package.build(500))
        rate_request = parse_document(transport.requests[1][0])
        assert child_text(rate_request, "ClientDetail/MeterNumber") == "Generated Meter Number"

    def test_subscription_without_user_credentials_sends_nothing(self):
        transport = FakeTransport()
        carrier = FedExCarrier(Credentials(csp_key="k", csp_password="p"), transport=transport)
        with pytest.raises(MissingCredentialsError):
            carrier.subscribe()
        assert transport.requests == []

    def test_version_capture_records_version(self, carrier_for):
        carrier, transport = carrier_for(load_fixture("version_capture_reply"))
        response = carrier.capture_version("Version Capture Request")
        assert response.customer_transaction_id == "Version Capture Request"
        assert carrier.negotiated_version == response.version
        request = parse_document(transport.requests[0][0])
        assert child_text(request, "TransactionDetail/CustomerTransactionId") == "Version Capture Request"

    def test_register_reads_profile_from_settings(self, credentials, client_identity):
        settings = AppSettings(_env_file=None, user_first_name="Ada", billing_country_code="GB")
        transport = FakeTransport(load_fixture("registration_reply"))
        carrier = FedExCarrier(credentials, transport=transport, client=client_identity, settings=settings)
        carrier.register()
        request = parse_document(transport.requests[0][0])
        assert child_text(request, "UserContactAndAddress/Contact/PersonName/FirstName") == "Ada"
        assert child_text(request, "BillingAddress/CountryCode") == "GB"


class TestShipping:

    def test_find_rates(self, carrier_for, ottawa, beverly_hills, packages):
        carrier, transport = carrier_for(load_fixture("rate_reply"))
        response = carrier.find_rates(ottawa, beverly_hills, packages)
        assert [r.price for r in response.rates] == [3836]
        assert response.rates[0].packages == packages
        assert transport.requests[0][0] == carrier.last_request

    def test_test_flag_can_be_overridden_per_call(self, carrier_for, ottawa, beverly_hills):
        carrier, transport = carrier_for(load_fixture("rate_reply"))
        response = carrier.find_rates(ottawa, beverly_hills, [Package.build(500)], test=False)
        assert transport.requests[0][1] is False
        assert response.test is False

    def test_transaction_id_override(self, carrier_for, ottawa, beverly_hills):
        carrier, transport = carrier_for(load_fixture("rate_reply"))
        carrier.find_rates(
            ottawa,
            beverly_hills,
            [Package.build(500)],
            RateOptions(customer_transaction_id="quote-77"),
        )
        request = parse_document(transport.requests[0][0])
        assert child_text(request, "TransactionDetail/CustomerTransactionId") == "quote-77"

    def test_find_tracking_info(self, carrier_for):
        carrier, transport = carrier_for(load_fixture("tracking_reply"))
        response = carrier.find_tracking_info("077973360403984")
        assert len(response.shipment_events) == 6
        request = parse_document(transport.requests[0][0])
        assert child_text(request, "PackageIdentifier/Value") == "077973360403984"
        assert child_text(request, "TransactionDetail/CustomerTransactionId") == "ParcelBridge"
