"""Automation of the Adblock Plus options page (``desktop-options.html``).

``SettingsPage`` drives the extension's own UI: checkbox-style toggles, the
Advanced tab and the filter-list table.  It holds a ``BrowserPage`` for
element lookup instead of extending it.
"""

from __future__ import annotations

import asyncio
import logging

from nfbrowser.constants import ANTI_TRACKING_LABELS
from nfbrowser.pages.browser_page import BrowserPage

logger = logging.getLogger(__name__)

ACCEPTABLE_ADS_SELECTOR = 'button[id="acceptable-ads-allow"]'
ADVANCED_TAB_SELECTOR = 'a[id="tab-advanced"]'
FILTER_LISTS_TABLE_SELECTOR = "ul[id=all-filter-lists-table]"
ADD_BY_URL_SELECTOR = "div[id=filterlist-by-url]"
IMPORT_URL_INPUT_SELECTOR = 'input[id="import-list-url"]'
VALIDATE_IMPORT_SELECTOR = 'button[data-action="validate-import-subscription"]'
UPDATE_ALL_SELECTOR = 'button[id="update"]'
TOGGLE_SUBSCRIPTION_SELECTOR = 'button[data-action="toggle-remove-subscription"]'

_CHECKBOX_VALUES = ("true", "false")

_CLICK_JS = "(element) => element.click()"
_SET_VALUE_JS = "(input, value) => { input.value = value; }"


def anti_tracking_selector(label: str) -> str:
    """Selector of the toggle button inside the list item labelled *label*."""
    return f'li[aria-label="{label}"]>{TOGGLE_SUBSCRIPTION_SELECTOR}'


class SettingsPage:
    """The Adblock Plus settings page.

    Args:
        page: ``BrowserPage`` showing the extension's options page.
        update_settle_seconds: How long to let a filter-list update run
            after triggering it.
    """

    def __init__(self, page: BrowserPage, *, update_settle_seconds: float = 5.0) -> None:
        self.page = page
        self.is_advanced = False
        self._update_settle_seconds = update_settle_seconds

    @property
    def url(self) -> str:
        return self.page.url

    async def close(self) -> None:
        await self.page.close()

    async def _click(self, selector: str) -> None:
        handle = await self.page.get_handle_single(selector)
        await handle.evaluate(_CLICK_JS)

    async def set_checkbox(self, selector: str, value: str | bool) -> bool:
        """Set an ``aria-checked`` toggle to *value*.

        Args:
            selector: Selector of the toggle element.
            value: ``"true"`` or ``"false"`` (a ``bool`` is accepted too).

        Returns:
            ``True`` if the toggle had to be clicked, ``False`` if it already
            had the requested value.

        Raises:
            ValueError: If *value* is not one of ``"true"`` / ``"false"``.
            NoElementFoundError: If no element matches *selector*.
        """
        if isinstance(value, bool):
            value = "true" if value else "false"
        if value not in _CHECKBOX_VALUES:
            raise ValueError(f"Wrong value! Expected one of ['true', 'false'], got: {value}")

        handle = await self.page.get_handle_single(selector)
        current = await handle.get_attribute("aria-checked")
        if current == value:
            logger.debug("Checkbox %s already %s", selector, value)
            return False

        await handle.evaluate(_CLICK_JS)
        logger.debug("Toggled checkbox %s to %s", selector, value)
        return True

    async def disable_acceptable_ads(self) -> None:
        """Turn off Acceptable Ads so as few ads as possible get through."""
        await self.set_checkbox(ACCEPTABLE_ADS_SELECTOR, "false")
        logger.info("Acceptable Ads disabled")

    async def enable_all_anti_tracking_options(self) -> None:
        """Turn on every built-in anti-tracking filter list."""
        for label in ANTI_TRACKING_LABELS:
            await self.set_checkbox(anti_tracking_selector(label), "true")
        logger.info("Anti-tracking options enabled")

    async def go_to_advanced_tab(self) -> None:
        """Switch to the Advanced tab, where filter lists are managed."""
        await self._click(ADVANCED_TAB_SELECTOR)
        self.is_advanced = True

    async def add_filter_list(self, selector: str, url: str) -> bool:
        """Subscribe to a filter list unless it is already in the table.

        Args:
            selector: Selector matching the list's row once subscribed.
            url: Where to download the list from.

        Returns:
            ``True`` if the list was added, ``False`` if it was already there.
        """
        if not self.is_advanced:
            await self.go_to_advanced_tab()

        pw_page = self.page.page
        await pw_page.wait_for_selector(FILTER_LISTS_TABLE_SELECTOR, state="attached")

        existing = await self.page.get_handles_all(selector)
        if len(existing) == 1:
            logger.debug("Filter list %s already present", selector)
            return False

        await pw_page.wait_for_selector(ADD_BY_URL_SELECTOR, state="attached")
        await pw_page.eval_on_selector(IMPORT_URL_INPUT_SELECTOR, _SET_VALUE_JS, url)
        await self._click(VALIDATE_IMPORT_SELECTOR)

        await pw_page.wait_for_selector(selector, state="attached")
        logger.info("Added filter list %s", url)
        return True

    async def update_all_filter_lists(self) -> None:
        """Ask Adblock Plus to refresh every subscribed filter list.

        The update runs in the background; nothing confirms it finished.
        """
        if not self.is_advanced:
            await self.go_to_advanced_tab()

        await self._click(UPDATE_ALL_SELECTOR)
        logger.info("Filter list update triggered")
        await asyncio.sleep(self._update_settle_seconds)
