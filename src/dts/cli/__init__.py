"""Typer CLI for dts (``dts db|effects|config``)."""
