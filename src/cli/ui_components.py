"""CLI UI components (Rich).

Why separate components:
- Keeps command functions free of rendering details.
- Lets every list/detail command share the same table and JSON output.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from pydantic import BaseModel
from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import APP_VERSION
from core.errors import Violation


def print_banner(console: Console) -> None:
    """Print the welcome banner (interactive commands only)."""

    title = Text("Coolify CLI", style="bold cyan")
    subtitle = Text(f"PaaS management from the terminal • v{APP_VERSION}", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def build_table(title: str, columns: Sequence[str], rows: Iterable[dict[str, Any]]) -> Table:
    """Table with one column per wire field name."""

    table = Table(title=title)
    for index, column in enumerate(columns):
        table.add_column(column, style="cyan" if index == 0 else "white", no_wrap=index == 0)
    for row in rows:
        table.add_row(*(escape(_cell(row.get(column))) for column in columns))
    return table


def print_entities(
    console: Console,
    title: str,
    columns: Sequence[str],
    entities: Sequence[BaseModel],
) -> None:
    if not entities:
        console.print("No data found")
        return
    rows = [entity.model_dump(mode="json", by_alias=True) for entity in entities]
    console.print(build_table(title, columns, rows))


def print_entity(console: Console, entity: BaseModel | Sequence[BaseModel] | dict[str, Any]) -> None:
    """Pretty JSON with camelCase keys."""

    if isinstance(entity, BaseModel):
        data: Any = entity.model_dump(mode="json", by_alias=True)
    elif isinstance(entity, dict):
        data = entity
    else:
        data = [item.model_dump(mode="json", by_alias=True) for item in entity]
    console.print_json(data=data)


def print_violations(console: Console, violations: Iterable[Violation]) -> None:
    console.print("[red]Validation error:[/red]")
    for violation in violations:
        console.print(f"  - {escape(violation.path or '<root>')}: {escape(violation.reason)}")
