"""CLI commands for extracting text, links and HTML from a page."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List, Optional

import typer
from rich.console import Console

from nfbrowser.exceptions import NFError
from nfbrowser.pages.browser_page import BrowserPage

extract_app = typer.Typer(help="Extract content from a web page.")
console = Console()


async def _with_page(url: str, adblock: bool, headless: bool, action: Callable[[BrowserPage], Awaitable[Any]]) -> Any:
    """Launch a session, open *url*, run *action* on it and tear everything down."""
    from nfbrowser.browser.session import BrowserSession
    from nfbrowser.settings import get_settings

    settings = get_settings()
    async with BrowserSession(settings.profile.path, settings.extension.path, settings=settings) as session:
        await session.launch(headless=headless, include_extension=adblock, include_profile=adblock)
        page = await session.get_page_for(url)
        try:
            return await action(page)
        finally:
            await page.close()


def _run(url: str, adblock: bool, headless: bool, action: Callable[[BrowserPage], Awaitable[Any]]) -> Any:
    try:
        return asyncio.run(_with_page(url, adblock, headless, action))
    except NFError as e:
        console.print(f"[red]✗[/red] {e.kind.value}: {e}")
        raise typer.Exit(code=1)


_ADBLOCK_OPTION = typer.Option(False, "--adblock/--no-adblock", help="Browse with the configured profile and Adblock Plus.")
_HEADLESS_OPTION = typer.Option(True, "--headless/--headful", help="Run Chromium without a window.")


@extract_app.command("text")
def extract_text(
    url: str = typer.Argument(..., help="Page to load."),
    selector: str = typer.Option("body", "--selector", "-s", help="Region to extract the text from."),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", "-i", help="Selector of elements to leave out (repeatable)."),
    all_matches: bool = typer.Option(False, "--all", help="Join the text of every matching element."),
    separator: str = typer.Option(" ", "--separator", help="Separator used with --all."),
    adblock: bool = _ADBLOCK_OPTION,
    headless: bool = _HEADLESS_OPTION,
) -> None:
    """Print the cleaned text of a page region."""

    async def action(page: BrowserPage) -> str:
        if all_matches:
            return await page.extract_text_multiple(selector, ignore, separator)
        return await page.extract_text(selector, ignore)

    typer.echo(_run(url, adblock, headless, action))


@extract_app.command("links")
def extract_links(
    url: str = typer.Argument(..., help="Page to load."),
    selector: str = typer.Option("body", "--selector", "-s", help="Root of the subtree to collect links from."),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", "-i", help="Link to leave out (repeatable)."),
    adblock: bool = _ADBLOCK_OPTION,
    headless: bool = _HEADLESS_OPTION,
) -> None:
    """Print the links found in a page region, one per line."""

    async def action(page: BrowserPage) -> list[str]:
        return await page.extract_links(selector, ignore)

    for link in _run(url, adblock, headless, action):
        typer.echo(link)


@extract_app.command("html")
def extract_html(
    url: str = typer.Argument(..., help="Page to load."),
    selector: str = typer.Option("body", "--selector", "-s", help="Element whose HTML to print."),
    adblock: bool = _ADBLOCK_OPTION,
    headless: bool = _HEADLESS_OPTION,
) -> None:
    """Print the outer HTML of a page element."""

    async def action(page: BrowserPage) -> str:
        return await page.extract_html(selector)

    typer.echo(_run(url, adblock, headless, action))
