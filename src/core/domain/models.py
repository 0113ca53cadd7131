"""Domain models (Pydantic v2).

These models describe *what* a shipment request or reply carries, not *how*
it is encoded on the wire:
- Location / Package are the caller's inputs.
- RateEstimate / ShipmentEvent are produced by reply parsing.
- The Response family is the envelope every carrier operation returns.
- Credentials is the only mutable model: the facade overwrites its fields
  when registration or subscription succeeds.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.units import (
    CENTIMETRES_PER_INCH,
    GRAMS_PER_KILOGRAM,
    GRAMS_PER_OUNCE,
    GRAMS_PER_POUND,
    UnitSystem,
)

Axis = Literal["length", "width", "height"]

_ALPHA2_RE = re.compile(r"^[A-Z]{2}$")


class Location(BaseModel):
    """A shipping-relevant address.

    Used as shipper/recipient/origin, as a hold-at-location address, and as
    the place attached to a tracking scan.
    """

    model_config = ConfigDict(frozen=True)

    country: str | None = Field(
        default=None,
        description="ISO 3166-1 alpha-2 country code.",
    )
    postal_code: str | None = Field(default=None, description="Postal or ZIP code.")
    province: str | None = Field(default=None, description="State or province code.")
    city: str | None = Field(default=None, description="City name.")
    address1: str | None = Field(default=None, description="First street line.")
    address2: str | None = Field(default=None, description="Second street line.")
    phone: str | None = Field(default=None, description="Contact phone number.")
    person_name: str | None = Field(default=None, description="Contact person.")
    company_name: str | None = Field(default=None, description="Contact company.")
    address_type: Literal["residential", "commercial"] | None = Field(
        default=None,
        description="Residential classifier; only 'residential' changes the request.",
    )

    @field_validator("country", mode="before")
    @classmethod
    def _normalize_country(cls, value: object) -> object:
        if value is None:
            return None
        text = str(value).strip().upper()
        if not text:
            return None
        if not _ALPHA2_RE.match(text):
            raise ValueError(f"country must be a two-letter code, got {value!r}")
        return text

    def country_code(self) -> str | None:
        """Two-letter country code used on the wire."""

        return self.country

    @property
    def is_residential(self) -> bool:
        return self.address_type == "residential"


class Package(BaseModel):
    """A physical parcel.

    Weight and dimensions are stored in grams and centimetres; `units`
    records the system the parcel was declared in, which also selects the
    system used when the parcel is transmitted.
    """

    model_config = ConfigDict(frozen=True)

    grams: float = Field(..., ge=0, description="Weight in grams.")
    length_cm: float = Field(default=0.0, ge=0)
    width_cm: float = Field(default=0.0, ge=0)
    height_cm: float = Field(default=0.0, ge=0)
    units: UnitSystem = Field(default=UnitSystem.METRIC)
    value: int | None = Field(
        default=None,
        ge=0,
        description="Declared value in minor currency units (cents).",
    )
    currency: str | None = Field(default=None, description="ISO 4217 currency of `value`.")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Named extras, e.g. 'dry_ice' (kilograms of dry ice).",
    )

    @classmethod
    def build(
        cls,
        weight: float,
        dimensions: tuple[float, float, float] | list[float] = (0, 0, 0),
        *,
        units: UnitSystem | str = UnitSystem.METRIC,
        value: int | None = None,
        currency: str | None = None,
        **options: Any,
    ) -> "Package":
        """Create a package from measurements in its declared unit system.

        Imperial weight is in ounces and dimensions in inches; metric weight
        is in grams and dimensions in centimetres. Dimensions are given as
        (length, width, height); missing trailing values count as zero.
        """

        system = UnitSystem(units)
        dims = [float(d) for d in dimensions] + [0.0] * (3 - len(dimensions))
        if system.is_imperial:
            grams = float(weight) * GRAMS_PER_OUNCE
            dims = [d * CENTIMETRES_PER_INCH for d in dims]
        else:
            grams = float(weight)
        return cls(
            grams=grams,
            length_cm=dims[0],
            width_cm=dims[1],
            height_cm=dims[2],
            units=system,
            value=value,
            currency=currency,
            options=options,
        )

    @property
    def imperial(self) -> bool:
        return self.units.is_imperial

    def pounds(self) -> float:
        return self.grams / GRAMS_PER_POUND

    def kilograms(self) -> float:
        return self.grams / GRAMS_PER_KILOGRAM

    def cm(self, axis: Axis) -> float:
        return {"length": self.length_cm, "width": self.width_cm, "height": self.height_cm}[axis]

    def inches(self, axis: Axis) -> float:
        return self.cm(axis) / CENTIMETRES_PER_INCH

    @property
    def dry_ice_kilograms(self) -> float | None:
        value = self.options.get("dry_ice")
        return float(value) if value is not None else None


class RateEstimate(BaseModel):
    """One quoted price line for a service."""

    model_config = ConfigDict(frozen=True)

    origin: Location
    destination: Location
    carrier: str = Field(..., min_length=1)
    service_name: str = Field(..., min_length=1)
    service_code: str = Field(..., description="Service code as returned by the carrier.")
    total_price: int = Field(..., description="Total net charge in minor currency units.")
    currency: str
    packages: list[Package] = Field(default_factory=list)
    delivery_date: str | None = Field(
        default=None,
        description="Delivery timestamp as returned by the carrier, when quoted.",
    )

    @property
    def price(self) -> int:
        return self.total_price


class ShipmentEvent(BaseModel):
    """One tracking scan."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Free-text event description.")
    time: datetime = Field(..., description="Scan time in UTC.")
    location: Location | None = Field(
        default=None,
        description="Scan location; absent for origin-created scans.",
    )


class VersionInfo(BaseModel):
    """Schema version tuple echoed by the gateway."""

    model_config = ConfigDict(frozen=True)

    service_id: str
    major: str
    intermediate: str
    minor: str


class Credentials(BaseModel):
    """Credential state read on every request build.

    `user_key`/`user_password` are overwritten after a successful
    registration and `meter_number` after a successful subscription. One
    writer per instance is assumed: concurrent calls sharing an instance
    need external synchronization around those updates.
    """

    csp_key: str | None = Field(default=None, description="Provider (CSP) key.")
    csp_password: str | None = Field(default=None, description="Provider (CSP) password.")
    account_number: str | None = None
    meter_number: str | None = None
    user_key: str | None = None
    user_password: str | None = None

    def user_credentials(self) -> dict[str, str | None]:
        """The four per-user fields, as a plain mapping."""

        return {
            "account_number": self.account_number,
            "meter_number": self.meter_number,
            "user_key": self.user_key,
            "user_password": self.user_password,
        }


class ClientIdentity(BaseModel):
    """Client-identity block values (product id/version and region)."""

    model_config = ConfigDict(frozen=True)

    product_id: str | None = None
    product_version: str | None = None
    region: str | None = None


class Response(BaseModel):
    """Common envelope of every carrier reply.

    `success` is derived from the reply's notification severity only.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    params: dict[str, Any] = Field(default_factory=dict, description="Reply as nested dicts.")
    xml: str = Field(default="", description="Raw reply text.")
    request: str | None = Field(default=None, description="Request text that produced the reply.")
    test: bool = Field(default=False, description="Whether the test endpoint was used.")


class RegistrationResponse(Response):
    user_key: str | None = None
    user_password: str | None = None
    version: VersionInfo | None = None


class SubscriptionResponse(Response):
    meter_number: str | None = None
    version: VersionInfo | None = None


class VersionCaptureResponse(Response):
    customer_transaction_id: str | None = None
    version: VersionInfo | None = None


class RateResponse(Response):
    rates: list[RateEstimate] = Field(default_factory=list)


class TrackingResponse(Response):
    tracking_number: str | None = None
    destination: Location | None = None
    shipment_events: list[ShipmentEvent] = Field(default_factory=list)

    @property
    def latest_event(self) -> ShipmentEvent | None:
        return self.shipment_events[-1] if self.shipment_events else None
