"""Client configuration.

Why here:
- Centralizes environment variables (pydantic-settings) so the CLI and
  library callers build clients the same way.
- Constructor arguments on `OmedaApiClient` always win over settings.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "omeda-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "omeda-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "omeda-client"
    return Path.home() / ".config" / "omeda-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


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
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# omeda-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central client configuration (env prefix `OMEDA_`)."""

    model_config = SettingsConfigDict(
        env_prefix="OMEDA_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    app_id: str | None = Field(
        default=None,
        description="Omeda API app id, sent as `x-omeda-appid`.",
    )
    brand: str | None = Field(
        default=None,
        description="Brand abbreviation used in brand-scoped URLs.",
    )
    client_abbrev: str | None = Field(
        default=None,
        description="Client abbreviation, required for client-scoped URLs.",
    )
    input_id: str | None = Field(
        default=None,
        description="Default input id for write calls (`x-omeda-inputid`).",
    )
    use_staging: bool = Field(
        default=False,
        description="Target ows.omedastaging.com instead of production.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Transport timeout per request (seconds).",
    )
    cache_ttl_seconds: int | None = Field(
        default=None,
        ge=0,
        description="Default TTL handed to the response cache, if any.",
    )
