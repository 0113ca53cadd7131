"""UI components for the CLI (Rich).

Why separate components:
- Avoids mixing command logic with presentation details.
- Lets several commands reuse the same tables and panels.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import RateEstimate, Response, ShipmentEvent


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Why here:
    - Avoids circular imports (main <-> doctor).
    - Lets non-interactive modes (JSON output) skip it.
    """

    title = Text("PARCEL-BRIDGE", style="bold cyan")
    subtitle = Text("FedEx XML gateway • Rates • Tracking", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_price(cents: int, currency: str) -> str:
    return f"{cents / 100:.2f} {currency}"


def build_rates_table(rates: list[RateEstimate]) -> Table:
    table = Table(title="Rates")
    table.add_column("Service", style="cyan", no_wrap=True)
    table.add_column("Code", style="dim")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Delivery", style="magenta")
    for rate in rates:
        table.add_row(
            rate.service_name,
            rate.service_code,
            format_price(rate.total_price, rate.currency),
            rate.delivery_date or "-",
        )
    return table


def build_events_table(events: list[ShipmentEvent]) -> Table:
    table = Table(title="Shipment events")
    table.add_column("Time (UTC)", style="cyan", no_wrap=True)
    table.add_column("Event", style="white")
    table.add_column("Location", style="magenta")
    for event in events:
        where = "-"
        if event.location is not None:
            parts = [event.location.city, event.location.province, event.location.country]
            where = ", ".join(p for p in parts if p)
        table.add_row(event.time.strftime("%Y-%m-%d %H:%M"), event.name, where)
    return table


def build_status_panel(response: Response, *, title: str) -> Panel:
    """Panel with the notification message and the endpoint used."""

    style = "green" if response.success else "red"
    body = Text()
    body.append("OK" if response.success else "FAILED", style=f"bold {style}")
    body.append(f"\n{response.message}")
    body.append(f"\nEndpoint: {'test' if response.test else 'live'}", style="dim")
    return Panel(body, title=Text(title, style="bold"), border_style=style)
