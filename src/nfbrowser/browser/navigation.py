"""Page navigation with network-idle waiting.

Wraps Playwright's ``page.goto`` / ``page.reload`` so that every load waits
for the network to go quiet before returning, and so that failures Chromium
reports as permanent (DNS, refused connections, TLS) surface as
``NavigationError``.  Navigations are not retried.
"""

from __future__ import annotations

import logging
from typing import Literal

from playwright.async_api import Error as PlaywrightError, Page, Response

from nfbrowser.exceptions import NavigationError

logger = logging.getLogger(__name__)

# Playwright error substrings that indicate a permanent navigation failure.
_FATAL_ERRORS: tuple[str, ...] = (
    "ERR_NAME_NOT_RESOLVED",
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_CLOSED",
    "ERR_SSL_PROTOCOL_ERROR",
    "ERR_CERT_AUTHORITY_INVALID",
    "ERR_CERT_COMMON_NAME_INVALID",
    "ERR_ADDRESS_UNREACHABLE",
    "ERR_FILE_NOT_FOUND",
)

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]


def _fatal_reason(exc: PlaywrightError) -> str | None:
    """Return a readable reason if *exc* is a permanent failure, else ``None``."""
    error_msg = str(exc)
    for pattern in _FATAL_ERRORS:
        if pattern in error_msg:
            return pattern.replace("ERR_", "").replace("_", " ").lower()
    return None


async def goto(
    page: Page,
    url: str,
    *,
    timeout_ms: int = 30_000,
    wait_until: WaitUntil = "networkidle",
) -> Response | None:
    """Navigate *page* to *url* and wait until the network is idle.

    Args:
        page: Playwright page instance.
        url: Target URL to navigate to.
        timeout_ms: Navigation timeout in milliseconds.
        wait_until: Playwright load state to wait for.

    Returns:
        The Playwright ``Response`` for the main frame navigation,
        or ``None`` if the page did not produce a response.

    Raises:
        NavigationError: If Chromium reported a permanent failure.
        playwright.async_api.TimeoutError: If the load state was not reached.
    """
    logger.debug("goto %s (wait_until=%s, timeout=%dms)", url, wait_until, timeout_ms)
    try:
        return await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightError as exc:
        reason = _fatal_reason(exc)
        if reason is None:
            raise
        logger.warning("Navigation to %s failed: %s", url, reason)
        raise NavigationError(url, reason) from exc


async def reload(
    page: Page,
    *,
    timeout_ms: int = 30_000,
    wait_until: WaitUntil = "networkidle",
) -> Response | None:
    """Reload the current page and wait until the network is idle.

    Same error translation as :func:`goto`.
    """
    logger.debug("reload %s (wait_until=%s, timeout=%dms)", page.url, wait_until, timeout_ms)
    try:
        return await page.reload(wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightError as exc:
        reason = _fatal_reason(exc)
        if reason is None:
            raise
        logger.warning("Reload of %s failed: %s", page.url, reason)
        raise NavigationError(page.url, reason) from exc
