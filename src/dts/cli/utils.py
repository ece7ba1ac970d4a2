"""
CLI utility helpers: output formatting and session management.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.orm import Session

from dts.core.config import get_settings
from dts.core.orm.session import create_dts_engine, dts_session_factory
from dts.ops.context import OperationContext
from dts.ops.result import OperationResult

console = Console()
err_console = Console(stderr=True)


# ── Session helper ───────────────────────────────────────────────────────


def database_url(database: str | None = None) -> str:
    """Resolve the database URL. A bare path is treated as a SQLite file."""
    if database is None:
        return get_settings().database_url
    if "://" in database:
        return database
    return f"sqlite:///{database}"


@contextmanager
def get_session(database: str | None = None) -> Iterator[Session]:
    """Open a session on ``database`` (defaults to ``DTS_DATABASE_URL``).

    The session is closed and its engine disposed when the block exits.
    """
    url = database_url(database)
    if url.startswith("sqlite:///") and not url.endswith(":memory:"):
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
    engine = create_dts_engine(url, echo=get_settings().database_echo)
    session = dts_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@contextmanager
def make_context(
    database: str | None = None,
    *,
    country_accounts_id: str | None = None,
) -> Iterator[OperationContext]:
    """Create an ``OperationContext`` over a fresh session for CLI commands."""
    with get_session(database) as session:
        yield OperationContext(session=session, caller="cli", country_accounts_id=country_accounts_id)


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / pydantic model / dict to plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "model_dump"):
        return obj.model_dump(by_alias=True)
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def fail(message: str, code: str = "ERROR") -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red] ({code}): {message}")
    raise typer.Exit(code=1)


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` to the terminal."""
    if not result.success:
        err = result.error
        if as_json:
            console.print_json(json.dumps(result.to_dict(), default=str))
            raise typer.Exit(code=1)
        msg = err.message if err else "Unknown error"
        code = err.code if err else "ERROR"
        for row_error in (err.details.get("errors", []) if err else []):
            err_console.print(f"  [yellow]{row_error.get('rowId')}[/yellow]: {row_error.get('message')}")
        fail(msg, code)

    data = result.data

    if as_json:
        payload = _to_dict(data) if not isinstance(data, list | tuple) else [_to_dict(d) for d in data]
        console.print_json(json.dumps(payload, default=str))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        print_table(data, title=title)
    else:
        print_dict(_to_dict(data), title=title)


def print_table(items: list, *, title: str = "") -> None:
    """Render a list of dataclasses/dicts as a Rich table."""
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        d = _to_dict(item)
        table.add_row(*("" if v is None else str(v) for v in d.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
