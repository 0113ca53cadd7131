"""FedEx code tables.

Static lookups from domain option keys to protocol enumeration strings,
plus the service display names used on rate estimates. The tables are
read-only mappings built once at import time.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from core.domain.errors import UnknownCodeError

CARRIER_NAME = "FedEx"

CARRIER_CODES: Mapping[str, str] = MappingProxyType(
    {
        "fedex_ground": "FDXG",
        "fedex_express": "FDXE",
    }
)

SERVICE_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "PRIORITY_OVERNIGHT": "FedEx Priority Overnight",
        "PRIORITY_OVERNIGHT_SATURDAY_DELIVERY": "FedEx Priority Overnight Saturday Delivery",
        "FEDEX_2_DAY": "FedEx 2 Day",
        "FEDEX_2_DAY_SATURDAY_DELIVERY": "FedEx 2 Day Saturday Delivery",
        "STANDARD_OVERNIGHT": "FedEx Standard Overnight",
        "FIRST_OVERNIGHT": "FedEx First Overnight",
        "FEDEX_EXPRESS_SAVER": "FedEx Express Saver",
        "FEDEX_1_DAY_FREIGHT": "FedEx 1 Day Freight",
        "FEDEX_1_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 1 Day Freight Saturday Delivery",
        "FEDEX_2_DAY_FREIGHT": "FedEx 2 Day Freight",
        "FEDEX_2_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 2 Day Freight Saturday Delivery",
        "FEDEX_3_DAY_FREIGHT": "FedEx 3 Day Freight",
        "FEDEX_3_DAY_FREIGHT_SATURDAY_DELIVERY": "FedEx 3 Day Freight Saturday Delivery",
        "INTERNATIONAL_PRIORITY": "FedEx International Priority",
        "INTERNATIONAL_PRIORITY_SATURDAY_DELIVERY": "FedEx International Priority Saturday Delivery",
        "INTERNATIONAL_ECONOMY": "FedEx International Economy",
        "INTERNATIONAL_FIRST": "FedEx International First",
        "INTERNATIONAL_PRIORITY_FREIGHT": "FedEx International Priority Freight",
        "INTERNATIONAL_ECONOMY_FREIGHT": "FedEx International Economy Freight",
        "GROUND_HOME_DELIVERY": "FedEx Ground Home Delivery",
        "FEDEX_GROUND": "FedEx Ground",
        "INTERNATIONAL_GROUND": "FedEx International Ground",
    }
)

PACKAGE_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "fedex_envelope": "FEDEX_ENVELOPE",
        "fedex_pak": "FEDEX_PAK",
        "fedex_box": "FEDEX_BOX",
        "fedex_tube": "FEDEX_TUBE",
        "fedex_10_kg_box": "FEDEX_10KG_BOX",
        "fedex_25_kg_box": "FEDEX_25KG_BOX",
        "your_packaging": "YOUR_PACKAGING",
    }
)

DROPOFF_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "regular_pickup": "REGULAR_PICKUP",
        "request_courier": "REQUEST_COURIER",
        "dropbox": "DROP_BOX",
        "business_service_center": "BUSINESS_SERVICE_CENTER",
        "station": "STATION",
    }
)

PAYMENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "sender": "SENDER",
        "recipient": "RECIPIENT",
        "third_party": "THIRDPARTY",
        "collect": "COLLECT",
    }
)

PACKAGE_IDENTIFIER_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "tracking_number": "TRACKING_NUMBER_OR_DOORTAG",
        "door_tag": "TRACKING_NUMBER_OR_DOORTAG",
        "rma": "RMA",
        "ground_shipment_id": "GROUND_SHIPMENT_ID",
        "ground_invoice_number": "GROUND_INVOICE_NUMBER",
        "ground_customer_reference": "GROUND_CUSTOMER_REFERENCE",
        "ground_po": "GROUND_PO",
        "express_reference": "EXPRESS_REFERENCE",
        "express_mps_master": "EXPRESS_MPS_MASTER",
    }
)

_UK_CURRENCY_RE = re.compile(r"UKL", re.IGNORECASE)


def _lookup(table: Mapping[str, str], key: str, kind: str) -> str:
    """Resolve a domain key; protocol codes already in the table pass through."""

    if key in table:
        return table[key]
    if key in table.values():
        return key
    raise UnknownCodeError(kind, key)


def carrier_code(key: str) -> str:
    return _lookup(CARRIER_CODES, key, "carrier code")


def package_type_code(key: str) -> str:
    return _lookup(PACKAGE_TYPES, key, "packaging type")


def dropoff_type_code(key: str) -> str:
    return _lookup(DROPOFF_TYPES, key, "dropoff type")


def payment_type_code(key: str) -> str:
    return _lookup(PAYMENT_TYPES, key, "payment type")


def package_identifier_type_code(key: str) -> str:
    return _lookup(PACKAGE_IDENTIFIER_TYPES, key, "package identifier type")


def service_name_for_code(service_code: str) -> str:
    """Display name for a service code.

    Unknown codes are title-cased word by word and prefixed with the carrier
    name, dropping a leading repetition of it:
    ``SOME_WEIRD_RATE`` -> ``FedEx Some Weird Rate``,
    ``FEDEX_EXPRESS_SAVER_SATURDAY_DELIVERY`` -> ``FedEx Express Saver Saturday Delivery``.
    """

    known = SERVICE_TYPES.get(service_code)
    if known is not None:
        return known

    name = " ".join(word.capitalize() for word in service_code.lower().split("_"))
    redundant = f"{CARRIER_NAME.capitalize()} "
    if name.startswith(redundant):
        name = name[len(redundant):]
    return f"{CARRIER_NAME} {name}"


def normalize_currency(currency: str) -> str:
    """FedEx reports UK pounds as UKL; rate estimates carry the ISO code GBP."""

    return "GBP" if _UK_CURRENCY_RE.search(currency) else currency
