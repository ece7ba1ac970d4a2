"""
CLI: ``dts effects``: inspect and edit human-effects rows of a record.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.table import Table

from dts.cli.utils import console, fail, make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command("tables")
def list_tables(
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """List the effect tables and their table-specific columns."""
    from dts.human_effects.definitions import table_definitions
    from dts.human_effects.tables import EffectTable

    rows = [
        {
            "table": t.value,
            "db_name": t.db_name,
            "columns": ", ".join(d.db_name for d in table_definitions(t)),
        }
        for t in EffectTable
    ]
    if json_out:
        console.print_json(json.dumps(rows))
        return
    table = Table(title="Effect tables")
    for col in ("table", "db_name", "columns"):
        table.add_column(col)
    for row in rows:
        table.add_row(row["table"], row["db_name"], row["columns"])
    console.print(table)


@app.command("show")
def show(
    record: str = typer.Option(..., "--record", "-r", help="Disaster record id"),
    table_name: str = typer.Option("Deaths", "--table", "-t", help="Effect table"),
    tenant: str | None = typer.Option(None, "--tenant", help="Country accounts id"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show the rows of one effect table for a record."""
    from dts.ops.human_effects import load_effects

    with make_context(database, country_accounts_id=tenant) as ctx:
        result = load_effects(ctx, record, table_name)
    if json_out or not result.success:
        output_result(result, as_json=json_out)
        return

    data = result.data
    table = Table(title=f"{data.table} for {data.record_id}")
    table.add_column("id", overflow="fold")
    for d in data.defs:
        table.add_column(d.js_name)
    for row_id, row in zip(data.ids, data.data):
        table.add_row(row_id, *("" if v is None else str(v) for v in row))
    console.print(table)
    if data.category_presence:
        console.print("[bold]Category presence:[/bold]")
        for name, tracked in data.category_presence.items():
            console.print(f"  [cyan]{name}[/cyan]: {'yes' if tracked else 'no'}")


@app.command("save")
def save(
    record: str = typer.Option(..., "--record", "-r", help="Disaster record id"),
    payload_file: Path = typer.Option(..., "--file", "-f", help="JSON save payload", exists=True),
    tenant: str | None = typer.Option(None, "--tenant", help="Country accounts id"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Apply a JSON save payload (deletes, updates, newRows, totalGroupFlags)."""
    from dts.ops.human_effects import save_effects
    from dts.ops.requests import SaveEffectsRequest

    try:
        payload = json.loads(payload_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON: {e}", "INVALID_JSON")
    if not isinstance(payload, dict):
        fail("Payload must be a JSON object", "INVALID_JSON")
    try:
        request = SaveEffectsRequest.from_json(payload)
    except (ValueError, TypeError, AttributeError) as e:
        fail(f"Invalid save payload: {e}", "INVALID_JSON")

    with make_context(database, country_accounts_id=tenant) as ctx:
        result = save_effects(ctx, record, request)
    output_result(result, as_json=json_out, title="Saved")


@app.command("clear")
def clear(
    record: str = typer.Option(..., "--record", "-r", help="Disaster record id"),
    table_name: str | None = typer.Option(None, "--table", "-t", help="Effect table (all when omitted)"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Delete the rows of one table, or of every table, for a record."""
    from dts.ops.human_effects import clear_effects, delete_all_effects

    with make_context(database) as ctx:
        if table_name is None:
            result = delete_all_effects(ctx, record)
        else:
            result = clear_effects(ctx, record, table_name)
    output_result(result, as_json=json_out, title="Cleared")
