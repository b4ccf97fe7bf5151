"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Tables/panels are reused by several commands.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.json import JSON as RichJSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.json_exporter import to_jsonable
from adapters.responses import ApiClientResponse, ApiResponseError
from core.domain.models import BrandDemographicEntity


def print_banner(console: Console, *, brand: str, environment: str) -> None:
    title = Text("Omeda API", style="bold cyan")
    subtitle = Text(f"brand {brand} • {environment}", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_response_panel(response: ApiClientResponse) -> Panel:
    """Panel with the response body (pretty JSON or raw text)."""

    if response.content_type == "json":
        body = RichJSON.from_data(to_jsonable(response.get_body()))
    else:
        body = Text(response.get_body() or "(empty)")

    source = "cache" if response.from_cache else f"HTTP {response.status_code}"
    subtitle = f"{source} • {response.time:.1f} ms"
    return Panel(body, title=response.content_type, subtitle=subtitle, border_style="green")


def build_error_panel(error: ApiResponseError) -> Panel:
    body = Text(error.message + "\n")
    if error.is_valid_but_not_active:
        body.append("\nThe record exists but is not active.", style="yellow")
    subtitle = f"HTTP {error.status_code} • {error.time:.1f} ms"
    return Panel(body, title="Omeda API error", subtitle=subtitle, border_style="red")


def build_demographics_table(demographics: Iterable[BrandDemographicEntity]) -> Table:
    table = Table(title="Brand Demographics")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Type", style="magenta")
    table.add_column("Values", style="green", justify="right")
    for demographic in demographics:
        table.add_row(
            str(demographic.Id),
            demographic.Description or "",
            str(demographic.DemographicType),
            str(len(demographic.DemographicValues)),
        )
    return table
