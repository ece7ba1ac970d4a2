"""
CLI: ``dts db``: database management commands.
"""

from __future__ import annotations

import typer

from dts.cli.utils import make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL or SQLite path"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Initialise database schema (create tables)."""
    from dts.ops.database import initialize_database

    with make_context(database) as ctx:
        result = initialize_database(ctx)
    output_result(result, as_json=json_out, title="Database Init")
