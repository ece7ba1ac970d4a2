"""
CLI: ``dts config``: settings and disaggregation configuration.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.table import Table

from dts.cli.utils import console, fail, get_session

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    database: str | None = typer.Option(None, "--database", "-d"),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
) -> None:
    """Show settings plus hidden and custom disaggregations."""
    from dts.core.config import get_settings
    from dts.core.orm.session import transaction
    from dts.human_effects.config import DsgConfigRepository

    settings = get_settings()
    with get_session(database) as session, transaction(session):
        repo = DsgConfigRepository(session)
        hidden = sorted(repo.get_hidden())
        custom = [d.to_json() for d in repo.get_custom()]

    if format == "json":
        payload = {"settings": settings.model_dump(), "hidden": hidden, "custom": custom}
        console.print_json(json.dumps(payload, default=str))
        return

    table = Table(title="Settings")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in sorted(settings.model_dump().items()):
        table.add_row(key, str(value))
    console.print(table)
    console.print(f"[bold]Hidden shared columns:[/bold] {', '.join(hidden) or '-'}")
    console.print("[bold]Custom dimensions:[/bold]")
    if not custom:
        console.print("  [dim]none[/dim]")
    for dim in custom:
        keys = ", ".join(e["key"] for e in dim["enum"])
        console.print(f"  [cyan]{dim['dbName']}[/cyan] ({dim['uiName']}): {keys}")


@app.command("hidden")
def set_hidden(
    cols: list[str] = typer.Argument(None, help="Shared columns to hide (none to show all)"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Replace the set of hidden shared columns."""
    from dts.core.errors import InvalidConfigError
    from dts.core.orm.session import transaction
    from dts.human_effects.config import DsgConfigRepository

    cols = cols or []
    try:
        with get_session(database) as session, transaction(session):
            DsgConfigRepository(session).set_hidden(cols)
    except InvalidConfigError as e:
        fail(e.message, "INVALID_CONFIG")
    console.print(f"[green]Hidden columns:[/green] {', '.join(cols) or '-'}")


@app.command("custom")
def set_custom(
    config_file: Path = typer.Argument(..., help="JSON list of custom dimensions", exists=True),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Replace the custom disaggregation dimensions from a JSON file."""
    from dts.core.errors import InvalidConfigError
    from dts.core.orm.session import transaction
    from dts.human_effects.config import DsgConfigRepository

    try:
        dims = json.loads(config_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON: {e}", "INVALID_JSON")
    if isinstance(dims, dict):
        dims = dims.get("config", [])
    if not isinstance(dims, list):
        fail("Expected a list of custom dimensions", "INVALID_CONFIG")

    try:
        with get_session(database) as session, transaction(session):
            saved = DsgConfigRepository(session).set_custom(dims)
    except InvalidConfigError as e:
        fail(e.message, "INVALID_CONFIG")
    console.print(f"[green]Custom dimensions:[/green] {', '.join(d.db_name for d in saved) or '-'}")
