"""Doctor command for configuration diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.omeda_client import OmedaApiClient
from adapters.responses import ApiResponseError
from core.config import AppSettings, write_user_env_vars
from core.errors import OmedaError

app = typer.Typer(no_args_is_help=True, help="Configuration checks and setup.")

_console = Console()


async def _check_api(client: OmedaApiClient) -> tuple[bool, str]:
    """Hit the brand comprehensive lookup, the cheapest brand-scoped read."""

    try:
        response = await client.get("comp/*", cache=False)
    except ApiResponseError as exc:
        return False, f"HTTP {exc.status_code}: {exc.message}"
    except (OmedaError, httpx.HTTPError, OSError) as exc:
        return False, str(exc) or type(exc).__name__
    return True, f"HTTP {response.status_code} in {response.time:.0f} ms"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Omeda Client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("App id", "OK" if settings.app_id else "MISSING", "OMEDA_APP_ID")
    table.add_row("Brand", "OK" if settings.brand else "MISSING", settings.brand or "OMEDA_BRAND")
    if settings.client_abbrev:
        table.add_row("Client abbrev", "OK", settings.client_abbrev)
    else:
        table.add_row("Client abbrev", "OPTIONAL", "Needed for client-scoped endpoints")
    if settings.input_id:
        table.add_row("Input id", "OK", "Write calls enabled")
    else:
        table.add_row("Input id", "OPTIONAL", "Needed for write calls")
    table.add_row("Environment", "OK", "staging" if settings.use_staging else "production")

    if settings.app_id and settings.brand:
        client = OmedaApiClient(settings=settings)
        ok_api, detail_api = asyncio.run(_check_api(client))
        table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)
    else:
        table.add_row("API connectivity", "SKIPPED", "App id and brand are required")

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    app_id = typer.prompt("Omeda app id", hide_input=True).strip()
    brand = typer.prompt("Brand abbreviation").strip()
    client_abbrev = typer.prompt("Client abbreviation (optional)", default="", show_default=False).strip()
    input_id = typer.prompt("Input id (optional)", default="", show_default=False).strip()
    use_staging = typer.confirm("Use the staging API?", default=False)

    if not app_id or not brand:
        raise typer.BadParameter("app id and brand are required")

    env_path = write_user_env_vars(
        {
            "OMEDA_APP_ID": app_id,
            "OMEDA_BRAND": brand,
            "OMEDA_CLIENT_ABBREV": client_abbrev or None,
            "OMEDA_INPUT_ID": input_id or None,
            "OMEDA_USE_STAGING": "true" if use_staging else "false",
        }
    )

    _console.print(f"[green]Saved Omeda config to:[/green] {env_path}")
