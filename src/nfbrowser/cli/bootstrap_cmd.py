"""CLI command that prepares a Chrome profile with Adblock Plus configured."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from nfbrowser.exceptions import NFError

console = Console()


async def _bootstrap(profile_path: str, extension_path: str) -> None:
    from nfbrowser.launching import launch_with_defaults

    session = await launch_with_defaults(profile_path, extension_path)
    await session.close()


def bootstrap(
    profile: Optional[Path] = typer.Option(None, "--profile", "-p", help="Chrome profile directory (created if missing)."),
    extension: Optional[Path] = typer.Option(None, "--extension", "-e", help="Unpacked Adblock Plus directory."),
) -> None:
    """Launch Chromium once and configure Adblock Plus in the profile.

    Disables Acceptable Ads, enables the anti-tracking lists and subscribes
    to the default filter lists. The settings persist in the profile.
    """
    from nfbrowser.settings import get_settings

    settings = get_settings()
    profile_path = str(profile or settings.profile.path)
    extension_path = str(extension or settings.extension.path)

    console.print(Panel(f"[bold]Profile:[/bold] {profile_path}\n[bold]Extension:[/bold] {extension_path}", title="nfbrowser", border_style="blue"))
    try:
        asyncio.run(_bootstrap(profile_path, extension_path))
    except NFError as e:
        console.print(f"[red]✗[/red] Bootstrap failed ({e.kind.value}): {e}")
        raise typer.Exit(code=1)
    console.print("[green]✓[/green] Adblock Plus configured.")
