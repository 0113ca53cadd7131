"""Shared fixtures: credentials, locations, packages and a fake transport."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from core.domain.models import ClientIdentity, Credentials, Location, Package

FIXTURES = Path(__file__).parent / "fixtures" / "fedex"


def load_fixture(name: str) -> str:
    return (FIXTURES / f"{name}.xml").read_text(encoding="utf-8")


def squash(xml: str) -> str:
    """Drop whitespace between tags so pretty-printed fixtures compare to builder output."""

    return re.sub(r">\s+<", "><", xml.strip())


class FakeTransport:
    """In-memory transport returning queued replies and recording requests."""

    def __init__(self, *replies: str) -> None:
        self.replies = list(replies)
        self.requests: list[tuple[str, bool]] = []
        self.closed = False

    def submit(self, request_text: str, test: bool = False) -> str:
        self.requests.append((request_text, test))
        return self.replies.pop(0)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        csp_key="1111",
        csp_password="2222",
        account_number="3333",
        meter_number="4444",
        user_key="5555",
        user_password="6666",
    )


@pytest.fixture
def client_identity() -> ClientIdentity:
    return ClientIdentity(product_id="7777", product_version="8888")


@pytest.fixture
def ottawa() -> Location:
    return Location(
        country="CA",
        postal_code="K1P 1J1",
        province="ON",
        city="Ottawa",
        address1="110 Laurier Avenue West",
    )


@pytest.fixture
def beverly_hills() -> Location:
    return Location(
        country="US",
        postal_code="90210",
        province="CA",
        city="Beverly Hills",
        address1="455 N. Rexford Dr.",
        address2="3rd Floor",
        address_type="residential",
    )


@pytest.fixture
def packages() -> list[Package]:
    return [
        Package.build(2500, (30, 20, 10), currency="CAD"),
        Package.build(40),
    ]


@pytest.fixture
def ship_date() -> datetime:
    return datetime(2009, 7, 20, 12, 1, 55, tzinfo=timezone(timedelta(hours=-4)))
