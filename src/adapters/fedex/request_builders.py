"""Request documents for the FedEx XML gateway.

One builder per operation. Every builder is a pure function of its typed
inputs and returns the serialized document. Sub-elements whose driving
option is absent are omitted; element order follows the gateway schema.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Sequence

from adapters.fedex.codes import (
    carrier_code,
    dropoff_type_code,
    package_identifier_type_code,
    package_type_code,
    payment_type_code,
)
from adapters.fedex.measurements import AXES, billable_dimensions, billable_weight
from adapters.fedex.xml_tree import add, add_if_present, append_if_present, element, to_xml
from core.domain.errors import MissingCredentialsError
from core.domain.models import ClientIdentity, Credentials, Location, Package
from core.domain.options import (
    DangerousGoods,
    RateOptions,
    RegistrationOptions,
    SubscriptionOptions,
    TrackingOptions,
    UserContact,
    VersionCaptureOptions,
)
from core.domain.units import UnitSystem

REGISTRATION_NAMESPACE = "http://fedex.com/ws/registration/v2"
RATE_NAMESPACE = "http://fedex.com/ws/rate/v7"
TRACK_NAMESPACE = "http://fedex.com/ws/track/v4"

VersionCode = tuple[str, int, int, int]

REGISTRATION_REQUEST_VERSION: VersionCode = ("fcas", 2, 1, 0)
SUBSCRIPTION_REQUEST_VERSION: VersionCode = ("fcas", 2, 1, 0)
VERSION_CAPTURE_REQUEST_VERSION: VersionCode = ("fcas", 2, 1, 0)
RATE_REQUEST_VERSION: VersionCode = ("crs", 7, 0, 0)
TRACKING_REQUEST_VERSION: VersionCode = ("trck", 4, 0, 0)

DEFAULT_TRANSACTION_ID = "ParcelBridge"


# Shared blocks


def _web_authentication_detail(credentials: Credentials, *, include_user: bool = True) -> ET.Element:
    wad = element("WebAuthenticationDetail")
    csp = add(wad, "CspCredential")
    add(csp, "Key", credentials.csp_key)
    add(csp, "Password", credentials.csp_password)

    if include_user:
        user = element("UserCredential")
        add_if_present(user, "Key", credentials.user_key)
        add_if_present(user, "Password", credentials.user_password)
        append_if_present(wad, user)
    return wad


def _client_detail(
    credentials: Credentials,
    client: ClientIdentity,
    *,
    include_meter: bool = True,
    blank_meter: bool = False,
    include_region: bool = False,
) -> ET.Element:
    detail = element("ClientDetail")
    add_if_present(detail, "AccountNumber", credentials.account_number)
    if blank_meter:
        # The meter is only issued by the subscription reply.
        add(detail, "MeterNumber")
    elif include_meter:
        add_if_present(detail, "MeterNumber", credentials.meter_number)
    add_if_present(detail, "ClientProductId", client.product_id)
    add_if_present(detail, "ClientProductVersion", client.product_version)
    if include_region:
        add_if_present(detail, "Region", client.region)
    return detail


def _transaction_detail(customer_transaction_id: str) -> ET.Element:
    detail = element("TransactionDetail")
    add(detail, "CustomerTransactionId", customer_transaction_id)
    return detail


def _version_node(version: VersionCode) -> ET.Element:
    node = element("Version")
    for tag, value in zip(("ServiceId", "Major", "Intermediate", "Minor"), version):
        add(node, tag, value)
    return node


def _request_header(
    root: ET.Element,
    credentials: Credentials,
    client: ClientIdentity,
    customer_transaction_id: str,
) -> None:
    root.append(_web_authentication_detail(credentials))
    append_if_present(root, _client_detail(credentials, client))
    root.append(_transaction_detail(customer_transaction_id))


def _address_node(tag: str, location: Location, *, with_residential: bool = False) -> ET.Element:
    address = element(tag)
    add_if_present(address, "StreetLines", location.address1)
    add_if_present(address, "StreetLines", location.address2)
    add_if_present(address, "City", location.city)
    add_if_present(address, "StateOrProvinceCode", location.province)
    add_if_present(address, "PostalCode", location.postal_code)
    add_if_present(address, "CountryCode", location.country_code())
    if with_residential and location.is_residential:
        add(address, "Residential", True)
    return address


def _location_node(tag: str, location: Location) -> ET.Element:
    node = element(tag)
    contact = element("Contact")
    add_if_present(contact, "PersonName", location.person_name)
    add_if_present(contact, "CompanyName", location.company_name)
    add_if_present(contact, "PhoneNumber", location.phone)
    append_if_present(node, contact)
    append_if_present(node, _address_node("Address", location, with_residential=True))
    return node


# Registration / subscription / version capture


def build_registration_request(
    credentials: Credentials,
    client: ClientIdentity,
    options: RegistrationOptions,
) -> str:
    """RegisterWebCspUserRequest: no user credential and no meter number yet."""

    root = element("RegisterWebCspUserRequest", xmlns=REGISTRATION_NAMESPACE)
    root.append(_web_authentication_detail(credentials, include_user=False))
    append_if_present(root, _client_detail(credentials, client, include_meter=False, include_region=True))
    root.append(_transaction_detail("Registration Request"))
    root.append(_version_node(REGISTRATION_REQUEST_VERSION))
    add_if_present(root, "Categories", options.categories)
    append_if_present(root, _address_node("BillingAddress", options.billing_address))

    contact_and_address = add(root, "UserContactAndAddress")
    contact = _user_contact_node(options.user_contact, split_name=True)
    append_if_present(contact_and_address, contact)
    append_if_present(contact_and_address, _address_node("Address", options.user_address))
    if len(contact_and_address) == 0:
        root.remove(contact_and_address)

    return to_xml(root)


def _user_contact_node(contact: UserContact, *, split_name: bool) -> ET.Element:
    node = element("Contact")
    if split_name:
        name = element("PersonName")
        add_if_present(name, "FirstName", contact.first_name)
        add_if_present(name, "LastName", contact.last_name)
        append_if_present(node, name)
    else:
        add_if_present(node, "PersonName", contact.full_name)
    add_if_present(node, "CompanyName", contact.company_name)
    add_if_present(node, "PhoneNumber", contact.phone_number)
    if not split_name:
        add_if_present(node, "FaxNumber", contact.fax_number)
    add_if_present(node, "EMailAddress", contact.email)
    return node


def build_subscription_request(
    credentials: Credentials,
    client: ClientIdentity,
    options: SubscriptionOptions,
) -> str:
    """SubscriptionRequest; needs the user key/password issued by registration."""

    missing = [name for name in ("user_key", "user_password") if not getattr(credentials, name)]
    if missing:
        raise MissingCredentialsError(missing)

    root = element("SubscriptionRequest", xmlns=REGISTRATION_NAMESPACE)
    root.append(_web_authentication_detail(credentials))
    append_if_present(root, _client_detail(credentials, client, blank_meter=True))
    root.append(_transaction_detail("Subscription Request"))
    root.append(_version_node(SUBSCRIPTION_REQUEST_VERSION))
    add_if_present(root, "CspSolutionId", options.csp_solution_id)
    add(root, "CspType", options.csp_type)

    subscriber = element("Subscriber")
    add_if_present(subscriber, "AccountNumber", credentials.account_number)
    append_if_present(subscriber, _user_contact_node(options.subscriber_contact, split_name=False))
    append_if_present(subscriber, _address_node("Address", options.subscriber_address))
    append_if_present(root, subscriber)

    append_if_present(root, _address_node("AccountShippingAddress", options.account_shipping_address))
    return to_xml(root)


def build_version_capture_request(
    credentials: Credentials,
    client: ClientIdentity,
    customer_transaction_id: str,
    options: VersionCaptureOptions,
) -> str:
    root = element("VersionCaptureRequest", xmlns=REGISTRATION_NAMESPACE)
    root.append(_web_authentication_detail(credentials))
    append_if_present(root, _client_detail(credentials, client, include_region=True))
    root.append(_transaction_detail(customer_transaction_id))
    root.append(_version_node(VERSION_CAPTURE_REQUEST_VERSION))
    add_if_present(root, "OriginLocationId", options.origin_location_id)
    add_if_present(root, "VendorProductPlatform", options.vendor_product_platform)
    return to_xml(root)


# Rating


def _shipment_special_services(options: RateOptions) -> ET.Element:
    ssr = element("SpecialServicesRequested")
    if options.saturday_pickup:
        add(ssr, "SpecialServiceTypes", "SATURDAY_PICKUP")
    if options.saturday_delivery:
        add(ssr, "SpecialServiceTypes", "SATURDAY_DELIVERY")
    if options.dry_ice:
        add(ssr, "SpecialServiceTypes", "DRY_ICE")
    if options.hold_at_location:
        add(ssr, "SpecialServiceTypes", "HOLD_AT_LOCATION")
    if options.home_delivery_premium:
        add(ssr, "SpecialServiceTypes", "HOME_DELIVERY_PREMIUM")

    if options.cod:
        cod_detail = add(ssr, "CodDetail")
        add(cod_detail, "CollectionType", options.cod.collection_type or "ANY")
        amount = element("CodCollectionAmount")
        add_if_present(amount, "Currency", options.cod.currency)
        add_if_present(amount, "Amount", options.cod.amount)
        append_if_present(ssr, amount)

    if options.hold_at_location:
        location = options.hold_at_location
        hold = add(ssr, "HoldAtLocationDetail")
        add_if_present(hold, "PhoneNumber", location.phone)
        address = element("Address")
        add_if_present(address, "StreetLines", location.address1)
        add_if_present(address, "City", location.city)
        add_if_present(address, "StateOrProvinceCode", location.province)
        add_if_present(address, "PostalCode", location.postal_code)
        add_if_present(address, "UrbanizationCode", location.address2)
        add_if_present(address, "CountryCode", location.country_code())
        if location.is_residential:
            add(address, "Residential", True)
        append_if_present(hold, address)

    if options.dry_ice:
        dry_ice = add(ssr, "ShipmentDryIceDetail")
        add_if_present(dry_ice, "PackageCount", options.dry_ice.quantity)
        total = add(dry_ice, "TotalWeight")
        add(total, "Units", options.dry_ice.weight_units)
        add(total, "Value", options.dry_ice.weight_value)

    if options.home_delivery_premium:
        premium = options.home_delivery_premium
        detail = add(ssr, "HomeDeliveryPremiumDetail")
        add(detail, "HomeDeliveryPremiumType", premium.premium_type)
        add(detail, "Date", premium.delivery_date.strftime("%Y-%m-%d"))
        add_if_present(detail, "PhoneNumber", premium.phone)

    return ssr


def _dangerous_goods_detail(goods: DangerousGoods) -> ET.Element:
    detail = element("DangerousGoodsDetail")
    add_if_present(detail, "Accessibility", goods.accessibility)
    add(detail, "CargoAircraftOnly", goods.cargo_aircraft_only)
    hazmat = add(detail, "HazMatCertificateData")
    add(hazmat, "DotProperShippingName", goods.dot_proper_shipping_name)
    add(hazmat, "DotHazardClassOrDivision", goods.dot_hazard_class_or_division)
    add(hazmat, "DotIdNumber", goods.dot_id_number)
    add(hazmat, "DotLabelType", goods.dot_label_type)
    add(hazmat, "PackingGroup", goods.packing_group)
    add(hazmat, "Quantity", goods.quantity)
    add(hazmat, "Units", goods.units)
    add(hazmat, "TwentyFourHourEmergencyResponseContactNumber", goods.emergency_contact_number)
    add(hazmat, "TwentyFourHourEmergencyResponseContactName", goods.emergency_contact_name)
    return detail


def _package_special_services(package: Package, options: RateOptions) -> ET.Element:
    ssr = element("SpecialServicesRequested")
    dry_ice = package.dry_ice_kilograms

    if options.dangerous_goods:
        add(ssr, "SpecialServiceTypes", "DANGEROUS_GOODS")
    if options.signature_option:
        add(ssr, "SpecialServiceTypes", "SIGNATURE_OPTION")
    if options.non_standard_container:
        add(ssr, "SpecialServiceTypes", "NON_STANDARD_CONTAINER")
    if dry_ice is not None:
        add(ssr, "SpecialServiceTypes", "DRY_ICE")

    if options.dangerous_goods:
        ssr.append(_dangerous_goods_detail(options.dangerous_goods))

    if dry_ice is not None:
        weight = add(ssr, "DryIceWeight")
        add(weight, "Units", "KG")
        add(weight, "Value", dry_ice)

    if options.signature_option:
        signature = add(ssr, "SignatureOptionDetail")
        add(signature, "OptionType", options.signature_option)

    return ssr


def _package_line_item(index: int, package: Package, units: UnitSystem, options: RateOptions) -> ET.Element:
    item = element("RequestedPackageLineItems")
    add(item, "SequenceNumber", f"{index:03d}")

    weight = add(item, "Weight")
    add(weight, "Units", units.weight_unit)
    add(weight, "Value", billable_weight(package, units.is_imperial))

    dimensions = billable_dimensions(package, units.is_imperial)
    if dimensions is not None:
        node = add(item, "Dimensions")
        for axis in AXES:
            add(node, axis.capitalize(), dimensions[axis])
        add(node, "Units", units.dimension_unit)

    append_if_present(item, _package_special_services(package, options))
    return item


def build_rate_request(
    credentials: Credentials,
    client: ClientIdentity,
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
    options: RateOptions | None = None,
    *,
    customer_transaction_id: str = DEFAULT_TRANSACTION_ID,
) -> str:
    """RateRequest for one shipment of `packages`.

    The first package's unit system decides the units of every line item.
    """

    options = options or RateOptions()
    units = packages[0].units if packages else UnitSystem.default()

    root = element("RateRequest", xmlns=RATE_NAMESPACE)
    _request_header(root, credentials, client, options.customer_transaction_id or customer_transaction_id)
    root.append(_version_node(RATE_REQUEST_VERSION))
    add(root, "ReturnTransitAndCommit", True)
    if options.carrier_code:
        add(root, "CarrierCodes", carrier_code(options.carrier_code))

    shipment = add(root, "RequestedShipment")
    add(shipment, "ShipTimestamp", options.ship_date or datetime.now().astimezone())
    add(shipment, "DropoffType", dropoff_type_code(options.dropoff_type))
    add_if_present(shipment, "ServiceType", options.service_type)
    add(shipment, "PackagingType", package_type_code(options.packaging_type))

    shipper = options.shipper or origin
    shipment.append(_location_node("Shipper", shipper))
    shipment.append(_location_node("Recipient", destination))
    if options.shipper is not None and options.shipper != origin:
        shipment.append(_location_node("Origin", origin))

    if options.shipping_charges:
        charges = options.shipping_charges
        payment = add(shipment, "ShippingChargesPayment")
        add(payment, "PaymentType", payment_type_code(charges.payment_type))
        payor = element("Payor")
        add_if_present(payor, "AccountNumber", charges.payor_account_number)
        add_if_present(payor, "CountryCode", charges.payor_country_code)
        append_if_present(payment, payor)

    if options.has_shipment_special_services:
        shipment.append(_shipment_special_services(options))

    if options.customs_value is not None:
        international = add(shipment, "InternationalDetail")
        customs = add(international, "CustomsValue")
        add_if_present(customs, "Currency", packages[0].currency if packages else None)
        add(customs, "Amount", f"{int(options.customs_value):.2f}")

    add(shipment, "RateRequestTypes", options.rate_request_types or "ACCOUNT")
    add(shipment, "PackageCount", len(packages))
    add(shipment, "PackageDetail", "INDIVIDUAL_PACKAGES")

    for index, package in enumerate(packages, start=1):
        shipment.append(_package_line_item(index, package, units, options))

    return to_xml(root)


# Tracking


def build_tracking_request(
    credentials: Credentials,
    client: ClientIdentity,
    tracking_number: str,
    options: TrackingOptions | None = None,
    *,
    customer_transaction_id: str = DEFAULT_TRANSACTION_ID,
) -> str:
    options = options or TrackingOptions()

    root = element("TrackRequest", xmlns=TRACK_NAMESPACE)
    _request_header(root, credentials, client, options.customer_transaction_id or customer_transaction_id)
    root.append(_version_node(TRACKING_REQUEST_VERSION))

    identifier = add(root, "PackageIdentifier")
    add(identifier, "Value", tracking_number)
    add(identifier, "Type", package_identifier_type_code(options.package_identifier_type))

    add(root, "IncludeDetailedScans", True)
    return to_xml(root)
