"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.coolify_client import create_client
from cli.ui_components import print_banner
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.errors import CoolifyError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _load_settings() -> AppSettings:
    return AppSettings()


def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        client = create_client(settings=settings)
        health = asyncio.run(client.health())
    except CoolifyError as exc:
        return False, str(exc)
    detail = f"status={health.status}"
    if health.version:
        detail += f" version={health.version}"
    return True, detail


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _load_settings()
    print_banner(_console)

    table = Table(title="Coolify CLI Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("COOLIFY_URL", "OK" if settings.url else "MISSING", escape(settings.url or "-"))
    table.add_row("COOLIFY_TOKEN", "OK" if settings.token else "MISSING", "set" if settings.token else "-")
    timeout = settings.http_timeout_seconds
    table.add_row("HTTP timeout", "OK", f"{timeout:g}s" if timeout else "none")

    ok_api = False
    if settings.url and settings.token:
        ok_api, detail_api = _check_api(settings)
        table.add_row("API health", "OK" if ok_api else "FAIL", escape(detail_api))
    else:
        table.add_row("API health", "SKIPPED", "URL and token required")

    _console.print(table)

    if not (settings.url and settings.token):
        _console.print(
            f"\n[yellow]Note:[/yellow] run `coolify doctor setup` or set COOLIFY_URL / COOLIFY_TOKEN "
            f"(user config: {escape(str(get_user_env_file()))})."
        )
    if not ok_api:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores URL and token in the user config .env)."""

    settings = _load_settings()
    base_url = typer.prompt("Coolify URL", default=settings.url or "", show_default=bool(settings.url)).strip()
    token = typer.prompt("API token", hide_input=True, confirmation_prompt=False).strip()

    if not base_url or not token:
        raise typer.BadParameter("URL and token are required")

    env_path = write_user_env_vars({"COOLIFY_URL": base_url, "COOLIFY_TOKEN": token})
    _console.print(f"[green]Saved Coolify config to:[/green] {escape(str(env_path))}")
