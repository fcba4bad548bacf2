"""CLI commands for inspecting and validating nfbrowser settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console

if TYPE_CHECKING:
    from nfbrowser.settings.config import Settings

settings_app = typer.Typer(help="Inspect and validate nfbrowser configuration.")
console = Console()

WAIT_UNTIL_STATES = ("commit", "domcontentloaded", "load", "networkidle")


def check_settings(settings: Settings) -> tuple[list[str], list[str]]:
    """Check that *settings* describe a browser setup that can actually run.

    Returns:
        ``(errors, warnings)``. Any error means a launch with these settings
        will fail.
    """
    errors: list[str] = []
    warnings: list[str] = []

    extension_dir = Path(settings.extension.path)
    if not extension_dir.is_dir():
        errors.append(f"Extension directory does not exist: {extension_dir}")
    else:
        if not (extension_dir / "manifest.json").is_file():
            errors.append(f"No manifest.json in extension directory: {extension_dir}")
        if not (extension_dir / settings.extension.settings_page).is_file():
            errors.append(f"Extension has no options page {settings.extension.settings_page!r}: {extension_dir}")

    if settings.browser.wait_until not in WAIT_UNTIL_STATES:
        errors.append(
            f"browser.wait_until must be one of {', '.join(WAIT_UNTIL_STATES)}; got {settings.browser.wait_until!r}"
        )

    if settings.browser.headless and not (settings.browser.channel or settings.browser.executable_path):
        warnings.append('Headless runs load extensions only with browser.channel = "chromium"')

    if not Path(settings.profile.path).exists():
        warnings.append(f"Profile directory {settings.profile.path} will be created on first launch")

    return errors, warnings


@settings_app.command("show")
def show_settings() -> None:
    """Display the currently resolved settings."""
    from nfbrowser.settings import get_settings

    settings = get_settings()
    console.print_json(json.dumps(settings.model_dump(mode="json"), indent=2, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Validate settings against the extension and profile on disk."""
    from nfbrowser.settings import get_settings

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)

    errors, warnings = check_settings(settings)

    console.print(f"  Environment: {settings.env}")
    console.print(f"  Extension dir: {settings.extension.path}")
    console.print(f"  Profile dir: {settings.profile.path}")
    for warning in warnings:
        console.print(f"[yellow]![/yellow] {warning}")
    for error in errors:
        console.print(f"[red]✗[/red] {error}")

    if errors:
        raise typer.Exit(code=1)
    console.print("[green]✓[/green] Settings are valid.")
