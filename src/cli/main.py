"""`omeda` command line interface (Typer + Rich)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_json
from adapters.omeda_client import OmedaApiClient
from adapters.responses import ApiResponseError
from cli.doctor import app as doctor_app
from cli.ui_components import (
    build_demographics_table,
    build_error_panel,
    build_response_panel,
    print_banner,
)
from core.config import AppSettings
from core.errors import ConfigurationError, OmedaError

app = typer.Typer(no_args_is_help=True, help="Omeda API client.")
app.add_typer(doctor_app, name="doctor")

_console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests to stderr."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _build_client(staging: bool | None, settings: AppSettings | None = None) -> OmedaApiClient:
    try:
        return OmedaApiClient(settings=settings or AppSettings(), use_staging=staging)
    except ConfigurationError as exc:
        _console.print(f"[red]{exc}[/red] Run `omeda doctor setup` to configure the client.")
        raise typer.Exit(code=2) from exc


@app.command()
def get(
    endpoint: str = typer.Argument(..., help="Endpoint relative to the brand/client URL, e.g. `comp/*`."),
    client: bool = typer.Option(False, "--client", help="Use the client-scoped URL."),
    allow_not_found: bool = typer.Option(False, "--allow-not-found", help="Treat a 404 as an empty response."),
    staging: Optional[bool] = typer.Option(None, "--staging/--production", help="Override OMEDA_USE_STAGING."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the body to a JSON file."),
) -> None:
    """GET an endpoint and print the response body."""

    api = _build_client(staging)
    try:
        response = asyncio.run(
            api.get(endpoint, error_on_not_found=not allow_not_found, use_client_url=client, cache=False)
        )
    except ApiResponseError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc
    except (OmedaError, httpx.HTTPError) as exc:
        _console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    _console.print(build_response_panel(response))
    if output is not None:
        path = export_json(payload=response.get_body(), output_path=output)
        _console.print(f"[green]Saved body to:[/green] {path}")


@app.command()
def demographics(
    staging: Optional[bool] = typer.Option(None, "--staging/--production", help="Override OMEDA_USE_STAGING."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the demographics to a JSON file."),
) -> None:
    """List the brand's demographics from the comprehensive lookup."""

    settings = AppSettings()
    api = _build_client(staging, settings)
    print_banner(_console, brand=api.brand, environment=api.environment)
    try:
        comp = asyncio.run(api.resource("brand").comprehensive_lookup(ttl=settings.cache_ttl_seconds))
    except ApiResponseError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc
    except (OmedaError, httpx.HTTPError) as exc:
        _console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    _console.print(build_demographics_table(comp.demographics))
    if output is not None:
        path = export_json(payload=comp.demographics, output_path=output)
        _console.print(f"[green]Saved demographics to:[/green] {path}")


def run() -> None:
    app()
