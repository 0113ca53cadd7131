"""Command line entry point (Typer).

Commands map one-to-one to the carrier operations. Everything that talks
to the gateway goes through `FedExCarrier`; this module only turns options
into domain objects and renders the responses.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.http_client import HttpTransport
from adapters.json_exporter import export_response_json
from cli import doctor
from cli.ui_components import build_events_table, build_rates_table, build_status_panel, print_banner
from core.config import AppSettings, env_key, write_user_env_vars
from core.domain.errors import CarrierError, MissingCredentialsError
from core.domain.models import Location, Package, Response
from core.domain.options import RateOptions, TrackingOptions
from core.domain.units import UnitSystem
from core.services.fedex_carrier import FedExCarrier

app = typer.Typer(no_args_is_help=True, help="FedEx XML gateway client: registration, rates and tracking.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and replies (DEBUG)."),
) -> None:
    _configure_logging(verbose)
    if _console.is_terminal:
        print_banner(_console)


@contextmanager
def _open_carrier(settings: AppSettings, test: bool | None) -> Iterator[FedExCarrier]:
    """Carrier over a fresh HTTP transport; the transport is closed on exit."""

    if test is not None:
        settings = settings.model_copy(update={"test_mode": test})
    with HttpTransport(settings) as transport:
        try:
            carrier = FedExCarrier.from_settings(settings, transport=transport)
        except MissingCredentialsError as exc:
            _err_console.print(f"[red]{exc}[/red]")
            _err_console.print(f"Set {env_key('csp_key')} / {env_key('csp_password')} or run `parcel-bridge doctor setup-credentials`.")
            raise typer.Exit(code=2) from exc
        try:
            yield carrier
        except CarrierError as exc:
            _err_console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc


def _finish(response: Response, *, title: str, json_path: Path | None) -> None:
    _console.print(build_status_panel(response, title=title))
    if json_path is not None:
        out = export_response_json(response=response, output_path=json_path)
        _console.print(f"[green]Saved JSON to:[/green] {out}")
    if not response.success:
        raise typer.Exit(code=1)


def _parse_package(raw: str, units: UnitSystem, value: int | None, currency: str | None) -> Package:
    """`WEIGHT` or `WEIGHT:LxWxH` in the selected unit system (grams/cm or oz/in)."""

    weight_text, _, dims_text = raw.partition(":")
    try:
        weight = float(weight_text)
        dims = [float(d) for d in dims_text.lower().split("x")] if dims_text else [0.0, 0.0, 0.0]
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid package {raw!r}; expected WEIGHT or WEIGHT:LxWxH") from exc
    if len(dims) != 3:
        raise typer.BadParameter(f"Invalid dimensions in {raw!r}; expected LxWxH")
    return Package.build(weight, dims, units=units, value=value, currency=currency)


@app.command()
def register(
    save: bool = typer.Option(False, "--save", help="Persist the issued user key/password in the user .env."),
    test: bool | None = typer.Option(None, "--test/--live", help="Override the configured endpoint."),
    json_path: Path | None = typer.Option(None, "--json", help="Export the response as JSON."),
) -> None:
    """Register a CSP user (issues a user key and password)."""

    with _open_carrier(AppSettings(), test) as carrier:
        response = carrier.register()

    if response.success and save:
        env_path = write_user_env_vars(
            {env_key("user_key"): response.user_key, env_key("user_password"): response.user_password}
        )
        _console.print(f"[green]Saved user credentials to:[/green] {env_path}")
    _finish(response, title="Registration", json_path=json_path)


@app.command()
def subscribe(
    save: bool = typer.Option(False, "--save", help="Persist the issued meter number in the user .env."),
    test: bool | None = typer.Option(None, "--test/--live", help="Override the configured endpoint."),
    json_path: Path | None = typer.Option(None, "--json", help="Export the response as JSON."),
) -> None:
    """Subscribe the account (issues a meter number)."""

    with _open_carrier(AppSettings(), test) as carrier:
        response = carrier.subscribe()

    if response.success and save:
        env_path = write_user_env_vars({env_key("meter_number"): response.meter_number})
        _console.print(f"[green]Saved meter number to:[/green] {env_path}")
    _finish(response, title="Subscription", json_path=json_path)


@app.command(name="version-capture")
def version_capture(
    transaction_id: str | None = typer.Option(None, "--transaction-id", help="Customer transaction id to echo."),
    test: bool | None = typer.Option(None, "--test/--live", help="Override the configured endpoint."),
    json_path: Path | None = typer.Option(None, "--json", help="Export the response as JSON."),
) -> None:
    """Capture the client version with the gateway."""

    with _open_carrier(AppSettings(), test) as carrier:
        response = carrier.capture_version(transaction_id)

    if response.version is not None:
        v = response.version
        _console.print(f"Version: {v.service_id} {v.major}.{v.intermediate}.{v.minor}")
    _finish(response, title="Version capture", json_path=json_path)


@app.command()
def rates(
    from_country: str = typer.Option(..., "--from-country", help="Origin country (ISO alpha-2)."),
    to_country: str = typer.Option(..., "--to-country", help="Destination country (ISO alpha-2)."),
    package: list[str] = typer.Option(..., "--package", "-p", help="WEIGHT or WEIGHT:LxWxH; repeatable."),
    from_postal: str | None = typer.Option(None, "--from-postal"),
    from_province: str | None = typer.Option(None, "--from-province"),
    from_city: str | None = typer.Option(None, "--from-city"),
    to_postal: str | None = typer.Option(None, "--to-postal"),
    to_province: str | None = typer.Option(None, "--to-province"),
    to_city: str | None = typer.Option(None, "--to-city"),
    residential: bool = typer.Option(False, "--residential", help="Destination is a residence."),
    imperial: bool = typer.Option(False, "--imperial", help="Package figures are ounces/inches."),
    value: int | None = typer.Option(None, "--value", help="Declared value per package (cents)."),
    currency: str | None = typer.Option(None, "--currency"),
    service_type: str | None = typer.Option(None, "--service-type", help="e.g. FEDEX_GROUND."),
    packaging_type: str = typer.Option("YOUR_PACKAGING", "--packaging"),
    dropoff_type: str = typer.Option("REGULAR_PICKUP", "--dropoff"),
    customs_value: int | None = typer.Option(None, "--customs-value", help="Customs value (whole units)."),
    saturday_delivery: bool = typer.Option(False, "--saturday-delivery"),
    test: bool | None = typer.Option(None, "--test/--live", help="Override the configured endpoint."),
    json_path: Path | None = typer.Option(None, "--json", help="Export the response as JSON."),
) -> None:
    """Quote rates for one shipment."""

    units = UnitSystem.from_bool(imperial)
    try:
        origin = Location(country=from_country, postal_code=from_postal, province=from_province, city=from_city)
        destination = Location(
            country=to_country,
            postal_code=to_postal,
            province=to_province,
            city=to_city,
            address_type="residential" if residential else None,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    packages = [_parse_package(p, units, value, currency) for p in package]

    options = RateOptions(
        service_type=service_type,
        packaging_type=packaging_type,
        dropoff_type=dropoff_type,
        customs_value=customs_value,
        saturday_delivery=saturday_delivery,
    )

    with _open_carrier(AppSettings(), test) as carrier:
        response = carrier.find_rates(origin, destination, packages, options)

    if response.rates:
        _console.print(build_rates_table(response.rates))
    _finish(response, title="Rates", json_path=json_path)


@app.command()
def track(
    tracking_number: str = typer.Argument(..., help="Tracking number (or other identifier)."),
    identifier_type: str = typer.Option("tracking_number", "--type", help="Package identifier type."),
    test: bool | None = typer.Option(None, "--test/--live", help="Override the configured endpoint."),
    json_path: Path | None = typer.Option(None, "--json", help="Export the response as JSON."),
) -> None:
    """Show the scan history of a shipment."""

    with _open_carrier(AppSettings(), test) as carrier:
        response = carrier.find_tracking_info(
            tracking_number,
            TrackingOptions(package_identifier_type=identifier_type),
        )

    if response.shipment_events:
        _console.print(build_events_table(response.shipment_events))
    _finish(response, title=f"Tracking {response.tracking_number or tracking_number}", json_path=json_path)


def run() -> None:
    app()
