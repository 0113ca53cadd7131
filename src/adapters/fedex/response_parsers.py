"""Reply parsers.

Each parser turns raw reply text into its typed response. Rules shared by
all of them:
- Broken markup raises `MalformedResponseError` carrying the body.
- `success` comes only from the first notification's severity.
- `params` is the whole reply rendered as nested dicts.
- Operation fields are read only from successful replies; a missing reply
  element yields an unsuccessful response rather than an exception.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Sequence

from dateutil import parser as date_parser
from dateutil import tz
from pydantic import ValidationError

from adapters.fedex.codes import CARRIER_NAME, normalize_currency, service_name_for_code
from adapters.fedex.notifications import Notification
from adapters.fedex.xml_tree import child_text, element_to_dict, find_reply_root, parse_document
from core.domain.models import (
    Location,
    Package,
    RateEstimate,
    RateResponse,
    RegistrationResponse,
    ShipmentEvent,
    SubscriptionResponse,
    TrackingResponse,
    VersionCaptureResponse,
    VersionInfo,
)

logger = logging.getLogger(__name__)

NO_RATES_MESSAGE = "There are no shipping rates available for the destination address"
SATURDAY_DELIVERY_SUFFIX = "_SATURDAY_DELIVERY"
ORIGIN_CREATED_EVENT = "OC"


def _read_reply(text: str, reply_name: str) -> tuple[ET.Element, ET.Element | None, Notification]:
    document = parse_document(text)
    reply = find_reply_root(document, reply_name)
    if reply is None:
        logger.warning("Reply has no %s element (root is %s)", reply_name, document.tag)
    notification = Notification.from_reply(reply if reply is not None else document)
    return document, reply, notification


def _version(reply: ET.Element) -> VersionInfo | None:
    node = reply.find("Version")
    if node is None:
        return None
    return VersionInfo(
        service_id=child_text(node, "ServiceId"),
        major=child_text(node, "Major"),
        intermediate=child_text(node, "Intermediate"),
        minor=child_text(node, "Minor"),
    )


def _to_minor_units(amount: str) -> int:
    try:
        value = Decimal(amount or "0")
    except InvalidOperation:
        logger.warning("Unreadable charge amount %r, using 0", amount)
        return 0
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _to_utc(text: str) -> datetime:
    moment = date_parser.parse(text)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz.UTC)
    return moment.astimezone(tz.UTC)


def parse_registration_reply(text: str, *, request: str | None = None, test: bool = False) -> RegistrationResponse:
    document, reply, notification = _read_reply(text, "RegisterWebCspUserReply")
    success = reply is not None and notification.is_success

    fields: dict[str, object] = {}
    if success:
        fields["version"] = _version(reply)
        fields["user_key"] = child_text(reply, "Credential/Key") or None
        fields["user_password"] = child_text(reply, "Credential/Password") or None

    return RegistrationResponse(
        success=success,
        message=notification.compose_message(),
        params=element_to_dict(document),
        xml=text,
        request=request,
        test=test,
        **fields,
    )


def parse_subscription_reply(text: str, *, request: str | None = None, test: bool = False) -> SubscriptionResponse:
    document, reply, notification = _read_reply(text, "SubscriptionReply")
    success = reply is not None and notification.is_success

    fields: dict[str, object] = {}
    if success:
        fields["version"] = _version(reply)
        fields["meter_number"] = child_text(reply, "MeterNumber") or None

    return SubscriptionResponse(
        success=success,
        message=notification.compose_message(),
        params=element_to_dict(document),
        xml=text,
        request=request,
        test=test,
        **fields,
    )


def parse_version_capture_reply(
    text: str,
    *,
    request: str | None = None,
    test: bool = False,
) -> VersionCaptureResponse:
    document, reply, notification = _read_reply(text, "VersionCaptureReply")
    success = reply is not None and notification.is_success

    fields: dict[str, object] = {}
    if success:
        fields["version"] = _version(reply)
        fields["customer_transaction_id"] = child_text(reply, "TransactionDetail/CustomerTransactionId") or None

    return VersionCaptureResponse(
        success=success,
        message=notification.compose_message(),
        params=element_to_dict(document),
        xml=text,
        request=request,
        test=test,
        **fields,
    )


def _rate_estimate(
    detail: ET.Element,
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
) -> RateEstimate:
    service_code = child_text(detail, "ServiceType")
    service_type = service_code
    if child_text(detail, "AppliedOptions") == "SATURDAY_DELIVERY":
        service_type = f"{service_code}{SATURDAY_DELIVERY_SUFFIX}"

    charge = "RatedShipmentDetails/ShipmentRateDetail/TotalNetCharge"
    return RateEstimate(
        origin=origin,
        destination=destination,
        carrier=CARRIER_NAME,
        service_name=service_name_for_code(service_type),
        service_code=service_code,
        total_price=_to_minor_units(child_text(detail, f"{charge}/Amount")),
        currency=normalize_currency(child_text(detail, f"{charge}/Currency")),
        packages=list(packages),
        delivery_date=child_text(detail, "DeliveryTimestamp") or None,
    )


def parse_rate_reply(
    text: str,
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
    *,
    request: str | None = None,
    test: bool = False,
) -> RateResponse:
    """RateReply -> RateResponse.

    A reply without any rate line is never successful, whatever severity
    the gateway reported.
    """

    document, reply, notification = _read_reply(text, "RateReply")
    success = notification.is_success
    message = notification.compose_message()

    rates: list[RateEstimate] = []
    if reply is not None:
        rates = [
            _rate_estimate(detail, origin, destination, packages)
            for detail in reply.findall("RateReplyDetails")
        ]

    if not rates:
        success = False
        message = f"{NO_RATES_MESSAGE} ({message})"

    logger.debug("Parsed %d rate line(s), success=%s", len(rates), success)
    return RateResponse(
        success=success,
        message=message,
        params=element_to_dict(document),
        xml=text,
        request=request,
        test=test,
        rates=rates,
    )


def _shipment_event(node: ET.Element) -> ShipmentEvent | None:
    name = child_text(node, "EventDescription")
    address = node.find("Address")
    country = child_text(address, "CountryCode")
    if not country:
        logger.debug("Skipping tracking event without country: %s", name)
        return None

    timestamp = child_text(node, "Timestamp")
    if not timestamp:
        logger.debug("Skipping tracking event without timestamp: %s", name)
        return None

    try:
        time = _to_utc(timestamp)
        location = None
        if child_text(node, "EventType") != ORIGIN_CREATED_EVENT:
            location = Location(
                city=child_text(address, "City") or None,
                province=child_text(address, "StateOrProvinceCode") or None,
                postal_code=child_text(address, "PostalCode") or None,
                country=country,
            )
    except (ValidationError, ValueError, OverflowError) as exc:
        logger.debug("Skipping unreadable tracking event %r: %s", name, exc)
        return None

    return ShipmentEvent(name=name, time=time, location=location)


def parse_tracking_reply(text: str, *, request: str | None = None, test: bool = False) -> TrackingResponse:
    """TrackReply -> TrackingResponse with events sorted by time.

    Scans without a country are dropped; origin-created scans (``OC``) keep
    no location.
    """

    document, reply, notification = _read_reply(text, "TrackReply")
    success = reply is not None and notification.is_success

    fields: dict[str, object] = {}
    details = reply.find("TrackDetails") if success else None
    if details is not None:
        fields["tracking_number"] = child_text(details, "TrackingNumber") or None

        destination = details.find("DestinationAddress")
        if destination is not None:
            try:
                fields["destination"] = Location(
                    country=child_text(destination, "CountryCode") or None,
                    province=child_text(destination, "StateOrProvinceCode") or None,
                    city=child_text(destination, "City") or None,
                )
            except ValidationError as exc:
                logger.debug("Ignoring unreadable destination address: %s", exc)

        events = [_shipment_event(node) for node in details.findall("Events")]
        fields["shipment_events"] = sorted((e for e in events if e is not None), key=lambda e: e.time)

    return TrackingResponse(
        success=success,
        message=notification.compose_message(),
        params=element_to_dict(document),
        xml=text,
        request=request,
        test=test,
        **fields,
    )
