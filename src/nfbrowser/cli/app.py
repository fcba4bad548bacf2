"""Unified CLI entry point for nfbrowser.

Config precedence: settings.default.toml -> settings.local.toml -> env vars (NF_* with double underscores) -> CLI flags.
"""

from __future__ import annotations

import logging

import typer

from nfbrowser.cli.bootstrap_cmd import bootstrap
from nfbrowser.cli.extract_cmd import extract_app
from nfbrowser.cli.settings_cmd import settings_app

try:
    from importlib.metadata import version

    VERSION = version("nfbrowser")
except Exception:
    VERSION = "unknown"

APP_HELP = (
    "nfbrowser — Chromium with Adblock Plus for clean page scraping. "
    "Config precedence: settings.default.toml -> settings.local.toml -> env vars (NF_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

app.command("bootstrap")(bootstrap)
app.add_typer(extract_app, name="extract")
app.add_typer(settings_app, name="settings")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"nfbrowser {VERSION}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
