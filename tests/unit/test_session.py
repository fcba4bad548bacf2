"""Unit tests for nfbrowser.browser.session — lifecycle, pages and extension discovery."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import pytest

from nfbrowser.browser.session import BrowserSession
from nfbrowser.exceptions import BrowserNotLaunchedError, ExtensionNotLoadedError
from nfbrowser.pages.browser_page import BrowserPage
from nfbrowser.pages.settings_page import SettingsPage

PROFILE = "/data/chrome-profile"
EXTENSION = "/opt/abp-3.12"
ABP_TITLE = "Adblock Plus - free ad blocker"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_page(url: str = "about:blank") -> MagicMock:
    page = MagicMock(name="page")
    page.url = url
    page.goto = AsyncMock()
    return page


def _mock_background_page(title: str, url: str) -> MagicMock:
    page = MagicMock(name=f"background:{title}")
    page.url = url
    page.title = AsyncMock(return_value=title)
    return page


def _mock_context(background_pages: list | None = None) -> MagicMock:
    context = MagicMock(name="context")
    context.close = AsyncMock()
    context.add_init_script = AsyncMock()
    context.new_page = AsyncMock(side_effect=lambda: _mock_page())
    context.background_pages = list(background_pages or [])
    return context


def _patch_playwright(*contexts: MagicMock):
    """Patch ``async_playwright`` so each launch returns the next context."""
    pw = MagicMock(name="playwright")
    pw.chromium.launch_persistent_context = AsyncMock(side_effect=list(contexts))
    pw.stop = AsyncMock()
    starter = MagicMock(name="async_playwright")
    starter.return_value.start = AsyncMock(return_value=pw)
    return patch("nfbrowser.browser.session.async_playwright", starter), pw


@pytest.fixture()
def session(fast_settings) -> BrowserSession:
    return BrowserSession(PROFILE, EXTENSION, settings=fast_settings)


# ---------------------------------------------------------------------------
# Launch / close
# ---------------------------------------------------------------------------


class TestLaunch:
    @pytest.mark.anyio
    async def test_launch_with_extension_and_profile(self, session: BrowserSession) -> None:
        context = _mock_context()
        patcher, pw = _patch_playwright(context)

        with patcher:
            await session.launch(headless=False, include_extension=True, include_profile=True)

        assert session.is_launched
        assert session.context is context
        call = pw.chromium.launch_persistent_context.await_args
        assert call.args == (PROFILE,)
        assert call.kwargs["headless"] is False
        args = call.kwargs["args"]
        assert "--no-sandbox" in args
        assert f"--disable-extensions-except={EXTENSION}" in args
        assert f"--load-extension={EXTENSION}" in args
        assert f"--user-data-dir={PROFILE}" in session.launch_profile.command_line

    @pytest.mark.anyio
    async def test_launch_bare(self, session: BrowserSession) -> None:
        patcher, pw = _patch_playwright(_mock_context())

        with patcher:
            await session.launch(headless=True, include_extension=False, include_profile=False)

        call = pw.chromium.launch_persistent_context.await_args
        assert call.args == ("",)
        assert call.kwargs["args"] == ["--no-sandbox"]
        assert call.kwargs["headless"] is True

    @pytest.mark.anyio
    async def test_stealth_scripts_registered(self, session: BrowserSession) -> None:
        context = _mock_context()
        patcher, _ = _patch_playwright(context)

        with patcher:
            await session.launch(headless=True, include_extension=False, include_profile=False)

        context.add_init_script.assert_awaited_once()

    @pytest.mark.anyio
    async def test_relaunch_closes_previous(self, session: BrowserSession) -> None:
        first, second = _mock_context(), _mock_context()
        patcher, pw = _patch_playwright(first, second)

        with patcher:
            await session.launch(headless=True, include_extension=False, include_profile=False)
            await session.launch(headless=True, include_extension=False, include_profile=False)

        first.close.assert_awaited_once()
        second.close.assert_not_awaited()
        assert session.context is second
        assert pw.stop.await_count == 1

    @pytest.mark.anyio
    async def test_failed_launch_stops_driver(self, session: BrowserSession) -> None:
        patcher, pw = _patch_playwright(RuntimeError("Executable doesn't exist"))

        with patcher, pytest.raises(RuntimeError):
            await session.launch(headless=True, include_extension=False, include_profile=False)

        pw.stop.assert_awaited_once()
        assert not session.is_launched


class TestClose:
    @pytest.mark.anyio
    async def test_close_when_not_launched_is_noop(self, session: BrowserSession) -> None:
        await session.close()
        assert not session.is_launched

    @pytest.mark.anyio
    async def test_close_releases_everything(self, session: BrowserSession) -> None:
        context = _mock_context()
        patcher, pw = _patch_playwright(context)

        with patcher:
            await session.launch(headless=True, include_extension=False, include_profile=False)
        await session.close()
        await session.close()

        context.close.assert_awaited_once()
        pw.stop.assert_awaited_once()
        assert not session.is_launched
        with pytest.raises(BrowserNotLaunchedError):
            _ = session.context

    @pytest.mark.anyio
    async def test_async_with_closes(self, fast_settings) -> None:
        context = _mock_context()
        patcher, _ = _patch_playwright(context)

        with patcher:
            async with BrowserSession(PROFILE, EXTENSION, settings=fast_settings) as session:
                await session.launch(headless=True, include_extension=False, include_profile=False)

        context.close.assert_awaited_once()
        assert not session.is_launched

    @pytest.mark.anyio
    async def test_async_with_closes_on_error(self, fast_settings) -> None:
        context = _mock_context()
        patcher, _ = _patch_playwright(context)

        with patcher, pytest.raises(KeyError):
            async with BrowserSession(PROFILE, EXTENSION, settings=fast_settings) as session:
                await session.launch(headless=True, include_extension=False, include_profile=False)
                raise KeyError("boom")

        context.close.assert_awaited_once()


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


class TestPages:
    @pytest.mark.anyio
    async def test_goto_requires_launch(self, session: BrowserSession) -> None:
        with pytest.raises(BrowserNotLaunchedError):
            await session.goto("https://example.com")

    @pytest.mark.anyio
    async def test_goto_waits_for_network_idle(self, session: BrowserSession) -> None:
        patcher, _ = _patch_playwright(_mock_context())

        with patcher:
            await session.launch(headless=True, include_extension=False, include_profile=False)
        page = await session.goto("https://example.com")

        page.goto.assert_awaited_once_with("https://example.com", wait_until="networkidle", timeout=30_000)

    @pytest.mark.anyio
    async def test_get_page_for_wraps(self, session: BrowserSession) -> None:
        patcher, _ = _patch_playwright(_mock_context())

        with patcher:
            await session.launch(headless=True, include_extension=False, include_profile=False)
        page = await session.get_page_for("https://example.com")

        assert isinstance(page, BrowserPage)
        page.page.goto.assert_awaited_once()


# ---------------------------------------------------------------------------
# Extension settings page
# ---------------------------------------------------------------------------


class TestExtensionSettingsPage:
    @pytest.mark.anyio
    async def test_requires_launch(self, session: BrowserSession) -> None:
        with pytest.raises(BrowserNotLaunchedError):
            await session.get_extension_settings_page()

    @pytest.mark.anyio
    async def test_opens_options_page(self, session: BrowserSession) -> None:
        context = _mock_context(
            [
                _mock_background_page("Some other extension", "chrome-extension://zzzz/bg.html"),
                _mock_background_page(ABP_TITLE, "chrome-extension://abcdefgh/background.html"),
            ]
        )
        patcher, _ = _patch_playwright(context)

        with patcher:
            await session.launch(headless=False, include_extension=True, include_profile=True)
        settings_page = await session.get_extension_settings_page()

        assert isinstance(settings_page, SettingsPage)
        assert settings_page.is_advanced is False
        settings_page.page.page.goto.assert_awaited_once_with(
            "chrome-extension://abcdefgh/desktop-options.html", wait_until="networkidle", timeout=30_000
        )

    @pytest.mark.anyio
    async def test_extension_missing(self, session: BrowserSession) -> None:
        context = _mock_context([_mock_background_page("Other", "chrome-extension://zzzz/bg.html")])
        patcher, _ = _patch_playwright(context)

        with patcher:
            await session.launch(headless=False, include_extension=True, include_profile=True)
        with pytest.raises(ExtensionNotLoadedError) as exc_info:
            await session.get_extension_settings_page()

        assert exc_info.value.title == ABP_TITLE
        context.new_page.assert_not_awaited()

    @pytest.mark.anyio
    async def test_waits_for_late_background_page(self, fast_settings) -> None:
        fast_settings.extension.discovery_timeout_seconds = 5.0
        session = BrowserSession(PROFILE, EXTENSION, settings=fast_settings)
        abp = _mock_background_page(ABP_TITLE, "chrome-extension://late/background.html")
        context = _mock_context()
        type(context).background_pages = PropertyMock(side_effect=[[], [], [abp]])
        patcher, _ = _patch_playwright(context)

        with patcher:
            await session.launch(headless=False, include_extension=True, include_profile=True)
        settings_page = await session.get_extension_settings_page()

        assert settings_page.page.page.goto.await_args.args == ("chrome-extension://late/desktop-options.html",)
