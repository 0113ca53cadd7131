"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import LIVE_URL, TEST_URL, build_http_client
from core.config import AppSettings, env_key, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_CREDENTIAL_FIELDS = ("csp_key", "csp_password", "account_number", "meter_number", "user_key", "user_password")


def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        with build_http_client(settings) as client:
            response = client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def credential_rows(settings: AppSettings) -> list[tuple[str, str, str]]:
    """(check, status, details) rows for the credential fields."""

    rows: list[tuple[str, str, str]] = []
    for field_name in _CREDENTIAL_FIELDS:
        value = getattr(settings, field_name)
        required = field_name in ("csp_key", "csp_password")
        if value:
            rows.append((field_name, "OK", "set"))
        elif required:
            rows.append((field_name, "FAIL", f"Set {env_key(field_name)}"))
        else:
            rows.append((field_name, "OPTIONAL", "not set"))
    return rows


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Skip the endpoint connectivity checks."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Parcel-Bridge Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    for row in credential_rows(settings):
        table.add_row(*row)
    table.add_row("Endpoint", "OK", "test (beta)" if settings.test_mode else "live")
    table.add_row("User config", "OK", str(get_user_env_file()))

    # Connectivity (best-effort)
    if not offline:
        for label, url in (("Test gateway", TEST_URL), ("Live gateway", LIVE_URL)):
            ok, detail = _check_http(url, settings)
            table.add_row(label, "OK" if ok else "FAIL", detail)

    _console.print(table)

    if not (settings.user_key and settings.meter_number):
        _console.print(
            "\n[yellow]Note:[/yellow] Run `parcel-bridge register --save` and then "
            "`parcel-bridge subscribe --save` to obtain user credentials and a meter number."
        )


@app.command(name="setup-credentials")
def setup_credentials() -> None:
    """Interactive provider credential setup (stored in the user config .env)."""

    csp_key = typer.prompt("CSP key").strip()
    csp_password = typer.prompt("CSP password", hide_input=True, confirmation_prompt=False).strip()
    account_number = typer.prompt("Account number", default="", show_default=False).strip()

    if not csp_key or not csp_password:
        raise typer.BadParameter("CSP key and password are required")

    env_path = write_user_env_vars(
        {
            env_key("csp_key"): csp_key,
            env_key("csp_password"): csp_password,
            env_key("account_number"): account_number or None,
        }
    )

    _console.print(f"[green]Saved credentials to:[/green] {env_path}")
