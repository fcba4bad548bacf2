"""Bootstrap: launch Chromium with Adblock Plus set up the way nfbrowser wants it."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from nfbrowser.browser.session import BrowserSession
from nfbrowser.constants import DEFAULT_FILTER_LISTS
from nfbrowser.exceptions import DirectoryNotFoundError

if TYPE_CHECKING:
    from nfbrowser.settings.config import Settings

logger = logging.getLogger(__name__)


async def _wait_for_path(path: Path, timeout_seconds: float, poll_interval: float = 0.1) -> bool:
    """Poll until *path* exists or *timeout_seconds* pass. Returns whether it exists."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds
    while not path.exists():
        if loop.time() >= deadline:
            return False
        await asyncio.sleep(poll_interval)
    return True


async def ensure_profile_exists(session: BrowserSession, settings: Settings | None = None) -> None:
    """Create the session's Chrome profile if it is missing.

    Adblock Plus fails to load when Chromium has to create the profile in
    the same launch, so the profile is created by a throw-away launch
    without the extension first.  The browser is closed whatever happens.
    """
    profile_path = Path(session.profile_path)
    if profile_path.exists():
        return

    if settings is None:
        from nfbrowser.settings import get_settings

        settings = get_settings()

    logger.info("Creating Chrome profile at %s", profile_path)
    try:
        await session.launch(
            headless=settings.browser.headless,
            include_extension=False,
            include_profile=True,
        )
        if not await _wait_for_path(profile_path, settings.profile.creation_timeout_seconds):
            logger.warning("Chrome profile %s did not appear in time", profile_path)
    finally:
        await session.close()


async def launch_with_defaults(
    profile_path: str | Path,
    extension_path: str | Path,
    settings: Settings | None = None,
) -> BrowserSession:
    """Launch Chromium with the default Adblock Plus configuration.

    The browser is headful unless ``browser.headless`` is set. Acceptable Ads is turned off, every anti-tracking list is turned on and
    the ``DEFAULT_FILTER_LISTS`` are subscribed and updated.

    Args:
        profile_path: Chrome profile directory; created if missing.
        extension_path: Unpacked Adblock Plus directory.
        settings: Settings to use; defaults to ``get_settings()``.

    Returns:
        The running ``BrowserSession``. The caller owns it and must close it.

    Raises:
        DirectoryNotFoundError: If *extension_path* does not exist.
    """
    if not Path(extension_path).exists():
        raise DirectoryNotFoundError(str(extension_path))

    if settings is None:
        from nfbrowser.settings import get_settings

        settings = get_settings()

    session = BrowserSession(str(profile_path), str(extension_path), settings=settings)
    await ensure_profile_exists(session, settings)

    await session.launch(headless=settings.browser.headless, include_extension=True, include_profile=True)
    try:
        settings_page = await session.get_extension_settings_page()
        await settings_page.disable_acceptable_ads()
        await settings_page.enable_all_anti_tracking_options()
        await settings_page.go_to_advanced_tab()

        for filter_list in DEFAULT_FILTER_LISTS:
            logger.info("Ensuring filter list %s", filter_list.name)
            await settings_page.add_filter_list(filter_list.selector, filter_list.url)

        await settings_page.update_all_filter_lists()
    except BaseException:
        await session.close()
        raise
    return session
