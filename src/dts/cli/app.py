"""
Root Typer application for the ``dts`` CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="dts",
    help="dts: human-effects disaggregation storage for disaster records.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from dts import __version__

        try:
            v = pkg_version("dts-human-effects")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"dts {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """dts CLI: manage the database, effect rows and disaggregation config."""
    from dts.core.config import get_settings
    from dts.core.logging import configure_logging

    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_format == "json",
        service=settings.service_name,
    )


# ── Sub-command registration ─────────────────────────────────────────────

from dts.cli.config import app as config_app  # noqa: E402
from dts.cli.db import app as db_app  # noqa: E402
from dts.cli.effects import app as effects_app  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.add_typer(effects_app, name="effects", help="Human-effects rows.")
app.add_typer(config_app, name="config", help="Settings and disaggregation configuration.")
