"""Browser session — owns the Chromium process and hands out pages.

A ``BrowserSession`` launches Chromium through Playwright as a persistent
context (the only mode in which Chromium loads unpacked extensions), opens
pages on it and locates the Adblock Plus background page to build a
``SettingsPage``.

Usage::

    async with BrowserSession("chrome-profile", "abp-3.12") as session:
        await session.launch(headless=False, include_extension=True, include_profile=True)
        settings_page = await session.get_extension_settings_page()
        await settings_page.disable_acceptable_ads()

A session is not safe to share between concurrently running tasks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from playwright.async_api import async_playwright

from nfbrowser.browser import navigation
from nfbrowser.browser.stealth import LaunchProfile, apply_stealth_scripts, build_launch_profile
from nfbrowser.exceptions import BrowserNotLaunchedError, ExtensionNotLoadedError
from nfbrowser.pages.browser_page import BrowserPage
from nfbrowser.pages.settings_page import SettingsPage

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext, Page, Playwright

    from nfbrowser.settings.config import Settings

logger = logging.getLogger(__name__)


class BrowserSession:
    """A Chromium instance plus the profile and extension it runs with.

    Args:
        profile_path: Chrome profile (user data) directory.
        extension_path: Unpacked Adblock Plus directory.
        settings: Settings to use; defaults to ``get_settings()``.
    """

    def __init__(self, profile_path: str, extension_path: str, settings: Settings | None = None) -> None:
        if settings is None:
            from nfbrowser.settings import get_settings

            settings = get_settings()

        self.profile_path = str(profile_path)
        self.extension_path = str(extension_path)
        self.launch_profile: LaunchProfile | None = None

        self._settings = settings
        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BrowserSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def is_launched(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> BrowserContext:
        """The live Playwright browser context.

        Raises:
            BrowserNotLaunchedError: If the browser is not running.
        """
        if self._context is None:
            raise BrowserNotLaunchedError()
        return self._context

    async def launch(self, headless: bool, include_extension: bool, include_profile: bool) -> None:
        """Launch Chromium.

        A session that is already running is closed first.

        Args:
            headless: Run without a visible window.
            include_extension: Load Adblock Plus (and no other extension).
            include_profile: Use ``profile_path`` as the user data directory.
        """
        if self._context is not None:
            logger.warning("Browser already launched; closing the previous instance")
            await self.close()

        browser_cfg = self._settings.browser
        stealth_cfg = self._settings.stealth
        profile = build_launch_profile(
            profile_path=self.profile_path,
            extension_path=self.extension_path,
            headless=headless,
            include_extension=include_extension,
            include_profile=include_profile,
            channel=browser_cfg.channel,
            executable_path=browser_cfg.executable_path,
            explicit_user_agent=stealth_cfg.user_agent,
            randomize_fingerprint=stealth_cfg.randomize_fingerprint,
        )

        playwright = await async_playwright().start()
        try:
            context = await playwright.chromium.launch_persistent_context(
                profile.user_data_dir,
                args=profile.args,
                **profile.launch_kwargs,
            )
            if stealth_cfg.apply_stealth_scripts:
                await apply_stealth_scripts(context)
        except Exception:
            await playwright.stop()
            raise

        self._playwright = playwright
        self._context = context
        self.launch_profile = profile
        logger.info(
            "Browser launched (headless=%s, extension=%s, profile=%s)",
            headless,
            include_extension,
            include_profile,
        )

    async def close(self) -> None:
        """Close the browser, if it was launched."""
        if self._context is None:
            return

        context, playwright = self._context, self._playwright
        self._context = None
        self._playwright = None
        try:
            await context.close()
        finally:
            if playwright is not None:
                await playwright.stop()
        logger.info("Browser closed")

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    async def goto(self, url: str) -> Page:
        """Open *url* in a new page and wait until the network is idle.

        Raises:
            BrowserNotLaunchedError: If the browser is not running.
        """
        context = self.context
        page = await context.new_page()
        browser_cfg = self._settings.browser
        await navigation.goto(page, url, timeout_ms=browser_cfg.timeout_ms, wait_until=browser_cfg.wait_until)
        return page

    async def get_page_for(self, url: str) -> BrowserPage:
        """Open *url* and wrap it in a ``BrowserPage``."""
        page = await self.goto(url)
        return BrowserPage(page, timeout_ms=self._settings.browser.timeout_ms)

    async def _find_background_page(self) -> Page:
        """Poll the context until the extension's background page shows up.

        Chromium registers extension background pages asynchronously after
        launch, so an immediate scan can miss it.

        Raises:
            ExtensionNotLoadedError: If it is not there before the deadline.
        """
        ext_cfg = self._settings.extension
        context = self.context
        loop = asyncio.get_running_loop()
        deadline = loop.time() + ext_cfg.discovery_timeout_seconds

        while True:
            for background_page in context.background_pages:
                if await background_page.title() == ext_cfg.background_title:
                    return background_page
            if loop.time() >= deadline:
                raise ExtensionNotLoadedError(ext_cfg.background_title)
            await asyncio.sleep(ext_cfg.poll_interval_seconds)

    async def get_extension_settings_page(self) -> SettingsPage:
        """Open the Adblock Plus options page of this session's extension.

        Raises:
            BrowserNotLaunchedError: If the browser is not running.
            ExtensionNotLoadedError: If no Adblock Plus background page exists.
        """
        if self._context is None:
            raise BrowserNotLaunchedError()

        background_page = await self._find_background_page()
        extension_host = urlsplit(background_page.url).netloc
        ext_cfg = self._settings.extension
        logger.debug("Adblock Plus extension id: %s", extension_host)

        page = await self.goto(f"chrome-extension://{extension_host}/{ext_cfg.settings_page}")
        return SettingsPage(
            BrowserPage(page, timeout_ms=self._settings.browser.timeout_ms),
            update_settle_seconds=self._settings.filter_lists.update_settle_seconds,
        )
