"""Core configuration.

- Centralizes environment variables (pydantic-settings) for the CLI, the
  HTTP transport and the carrier facade.
- Persists issued credentials (user key/password, meter number) in a
  per-user `.env`, so a registration survives the process that made it.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "parcel-bridge"
ENV_PREFIX = "PARCEL_BRIDGE_"

_ESCAPE_RE = re.compile(r"\\(.)")


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _quote_env_value(value: str) -> str:
    """Double-quote a value so `#`, quotes and spaces survive a dotenv reader."""

    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _unquote_env_value(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _ESCAPE_RE.sub(lambda m: "\n" if m.group(1) == "n" else m.group(1), value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1]
    return value


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = _unquote_env_value(value.strip())
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global `.env`.

    `None` values are skipped; existing keys not mentioned are preserved.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# parcel-bridge user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={_quote_env_value(existing[key])}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


def env_key(field_name: str) -> str:
    """Environment variable name for an `AppSettings` field."""

    return f"{ENV_PREFIX}{field_name.upper()}"


class AppSettings(BaseSettings):
    """Central application configuration.

    The project `.env` is read first, then the per-user `.env`; real
    environment variables take precedence over both.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    # Transport
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    http_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries on connection errors before giving up.",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/0.1",
        min_length=1,
        description="User-Agent sent to the gateway.",
    )
    test_mode: bool = Field(
        default=False,
        description="Send requests to the beta gateway instead of production.",
    )

    # Credentials
    csp_key: str | None = Field(default=None, description="CSP provider key.")
    csp_password: str | None = Field(default=None, description="CSP provider password.")
    account_number: str | None = Field(default=None, description="Shipper account number.")
    meter_number: str | None = Field(default=None, description="Meter number issued by subscription.")
    user_key: str | None = Field(default=None, description="User key issued by registration.")
    user_password: str | None = Field(default=None, description="User password issued by registration.")

    # Client identity
    client_product_id: str | None = Field(default=None, description="Client product id.")
    client_product_version: str | None = Field(default=None, description="Client product version.")
    client_region: str | None = Field(default=None, description="Client region (e.g. US, CA).")
    customer_transaction_id: str = Field(
        default="ParcelBridge",
        min_length=1,
        description="Transaction id sent with rate and tracking requests.",
    )

    # Registration / subscription profile
    categories: str | None = Field(default="SHIPPING", description="Registration categories.")
    csp_solution_id: str | None = Field(default=None, description="CSP solution id (subscription).")
    user_first_name: str | None = None
    user_last_name: str | None = None
    user_company_name: str | None = None
    user_phone_number: str | None = None
    user_fax_number: str | None = None
    user_email: str | None = None
    user_street_lines: str | None = None
    user_city: str | None = None
    user_state_or_province_code: str | None = None
    user_postal_code: str | None = None
    user_country_code: str | None = None
    billing_street_lines: str | None = None
    billing_city: str | None = None
    billing_state_or_province_code: str | None = None
    billing_postal_code: str | None = None
    billing_country_code: str | None = None

    # Version capture
    origin_location_id: str | None = Field(default=None, description="Origin location id.")
    vendor_product_platform: str | None = Field(default=None, description="Vendor product platform.")
