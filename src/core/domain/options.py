"""Per-operation options.

Each carrier operation takes one of these dataclasses instead of a loose
option mapping. Defaults mirror the gateway defaults (e.g. dropoff type
REGULAR_PICKUP, packaging YOUR_PACKAGING). Registration, subscription and
version capture read their persisted defaults from `AppSettings` through
`from_settings`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

from core.domain.models import Location

if TYPE_CHECKING:
    from core.config import AppSettings


@dataclass(frozen=True)
class UserContact:
    """Contact block used by registration and subscription."""

    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    phone_number: str | None = None
    fax_number: str | None = None
    email: str | None = None

    @property
    def full_name(self) -> str | None:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else None


def _settings_location(settings: "AppSettings", prefix: str) -> Location:
    return Location(
        address1=getattr(settings, f"{prefix}_street_lines"),
        city=getattr(settings, f"{prefix}_city"),
        province=getattr(settings, f"{prefix}_state_or_province_code"),
        postal_code=getattr(settings, f"{prefix}_postal_code"),
        country=getattr(settings, f"{prefix}_country_code"),
    )


def _settings_contact(settings: "AppSettings") -> UserContact:
    return UserContact(
        first_name=settings.user_first_name,
        last_name=settings.user_last_name,
        company_name=settings.user_company_name,
        phone_number=settings.user_phone_number,
        fax_number=settings.user_fax_number,
        email=settings.user_email,
    )


@dataclass(frozen=True)
class RegistrationOptions:
    billing_address: Location
    user_contact: UserContact
    user_address: Location
    categories: str | None = "SHIPPING"

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "RegistrationOptions":
        return cls(
            billing_address=_settings_location(settings, "billing"),
            user_contact=_settings_contact(settings),
            user_address=_settings_location(settings, "user"),
            categories=settings.categories,
        )


@dataclass(frozen=True)
class SubscriptionOptions:
    csp_solution_id: str | None
    subscriber_contact: UserContact
    subscriber_address: Location
    account_shipping_address: Location
    csp_type: str = "CERTIFIED_SOLUTION_PROVIDER"

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "SubscriptionOptions":
        return cls(
            csp_solution_id=settings.csp_solution_id,
            subscriber_contact=_settings_contact(settings),
            subscriber_address=_settings_location(settings, "user"),
            account_shipping_address=_settings_location(settings, "billing"),
        )


@dataclass(frozen=True)
class VersionCaptureOptions:
    origin_location_id: str | None = None
    vendor_product_platform: str | None = None

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "VersionCaptureOptions":
        return cls(
            origin_location_id=settings.origin_location_id,
            vendor_product_platform=settings.vendor_product_platform,
        )


@dataclass(frozen=True)
class ShippingChargesPayment:
    """Who pays for the shipment (payment type accepts a table key or code)."""

    payment_type: str
    payor_account_number: str | None = None
    payor_country_code: str | None = None


@dataclass(frozen=True)
class CashOnDelivery:
    amount: str | float | None = None
    currency: str | None = None
    collection_type: str = "ANY"


@dataclass(frozen=True)
class ShipmentDryIce:
    """Shipment-level dry ice declaration."""

    weight_value: float | None = None
    weight_units: str | None = None
    quantity: int | None = None


@dataclass(frozen=True)
class HomeDeliveryPremium:
    premium_type: str
    delivery_date: date
    phone: str | None = None


@dataclass(frozen=True)
class DangerousGoods:
    """Dangerous goods declaration applied to every package line item."""

    accessibility: str | None = None
    cargo_aircraft_only: bool | None = None
    dot_proper_shipping_name: str | None = None
    dot_hazard_class_or_division: str | None = None
    dot_id_number: str | None = None
    dot_label_type: str | None = None
    packing_group: str | None = None
    quantity: float | None = None
    units: str | None = None
    emergency_contact_number: str | None = None
    emergency_contact_name: str | None = None


@dataclass(frozen=True)
class RateOptions:
    """Options recognized by a rate request.

    `dropoff_type`, `packaging_type` and `carrier_code` accept either a
    domain key (``"regular_pickup"``) or the protocol code
    (``"REGULAR_PICKUP"``).
    """

    ship_date: datetime | date | None = None
    dropoff_type: str = "REGULAR_PICKUP"
    service_type: str | None = None
    packaging_type: str = "YOUR_PACKAGING"
    carrier_code: str | None = None
    shipper: Location | None = None
    shipping_charges: ShippingChargesPayment | None = None
    saturday_pickup: bool = False
    saturday_delivery: bool = False
    cod: CashOnDelivery | None = None
    dry_ice: ShipmentDryIce | None = None
    hold_at_location: Location | None = None
    home_delivery_premium: HomeDeliveryPremium | None = None
    customs_value: int | float | str | None = None
    rate_request_types: str = "ACCOUNT"
    dangerous_goods: DangerousGoods | None = None
    signature_option: str | None = None
    non_standard_container: bool = False
    customer_transaction_id: str | None = None

    @property
    def has_shipment_special_services(self) -> bool:
        return bool(
            self.saturday_pickup
            or self.saturday_delivery
            or self.cod
            or self.dry_ice
            or self.hold_at_location
            or self.home_delivery_premium
        )


@dataclass(frozen=True)
class TrackingOptions:
    package_identifier_type: str = "tracking_number"
    customer_transaction_id: str | None = None
