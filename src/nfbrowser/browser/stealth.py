"""Launch configuration and anti-detection for the Chromium session.

Provides a ``LaunchProfile`` that configures Playwright's
``launch_persistent_context()`` call with:

- The Chromium flags for sandboxing and extension loading
- The user data directory (Chrome profile) to run against
- Optional fingerprint randomization (viewport, locale, timezone, user-agent)
- Stealth patches (disable ``navigator.webdriver``, patch ``chrome.runtime``)

Usage::

    from nfbrowser.browser.stealth import apply_stealth_scripts, build_launch_profile

    profile = build_launch_profile(
        profile_path="chrome-profile",
        extension_path="abp-3.12",
        include_extension=True,
        include_profile=True,
    )
    context = await pw.chromium.launch_persistent_context(
        profile.user_data_dir, args=profile.args, **profile.launch_kwargs
    )
    await apply_stealth_scripts(context)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Fingerprint pools (Chrome on desktop; extensions only load in Chromium)
# ---------------------------------------------------------------------------

_USER_AGENTS: list[str] = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
]

# Common viewport sizes (width × height)
_VIEWPORTS: list[dict[str, int]] = [
    {"width": 1920, "height": 1080},
    {"width": 1366, "height": 768},
    {"width": 1536, "height": 864},
    {"width": 1440, "height": 900},
    {"width": 1280, "height": 720},
]

# Locale + timezone pairs (plausible combinations)
_LOCALE_TIMEZONE_PAIRS: list[tuple[str, str]] = [
    ("en-US", "America/New_York"),
    ("en-US", "America/Los_Angeles"),
    ("en-GB", "Europe/London"),
    ("de-DE", "Europe/Berlin"),
    ("fr-FR", "Europe/Paris"),
    ("ro-RO", "Europe/Bucharest"),
]

# Stealth JavaScript, injected via context.add_init_script()
_STEALTH_SCRIPTS: str = """
// Remove navigator.webdriver flag
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });

// Mimic chrome.runtime (present in real Chrome)
if (!window.chrome) window.chrome = {};
if (!window.chrome.runtime) window.chrome.runtime = {};

// Patch navigator.plugins to look non-empty
Object.defineProperty(navigator, 'plugins', {
    get: () => [1, 2, 3, 4, 5],
});

// Prevent detection via permissions API
if (window.navigator.permissions) {
    const originalQuery = window.navigator.permissions.query;
    window.navigator.permissions.query = (parameters) =>
        parameters.name === 'notifications'
            ? Promise.resolve({ state: Notification.permission })
            : originalQuery(parameters);
}
"""

NO_SANDBOX_FLAG = "--no-sandbox"
DISABLE_EXTENSIONS_FLAG = "--disable-extensions"


# ---------------------------------------------------------------------------
# Launch profile
# ---------------------------------------------------------------------------


@dataclass
class LaunchProfile:
    """Everything needed for one ``launch_persistent_context()`` call.

    Playwright refuses ``--user-data-dir`` inside ``args`` and takes the
    directory as a separate argument instead, so it is kept apart here.
    An empty ``user_data_dir`` makes Playwright use a throw-away directory.
    """

    args: list[str] = field(default_factory=list)
    user_data_dir: str = ""
    launch_kwargs: dict[str, Any] = field(default_factory=dict)

    # Metadata for logging
    user_agent: str = ""
    viewport: dict[str, int] = field(default_factory=dict)
    locale: str = ""
    timezone_id: str = ""

    @property
    def headless(self) -> bool:
        return bool(self.launch_kwargs.get("headless", True))

    @property
    def command_line(self) -> list[str]:
        """The full Chromium flag set, user data directory included."""
        flags = list(self.args)
        if self.user_data_dir:
            flags.append(f"--user-data-dir={self.user_data_dir}")
        return flags


def build_launch_profile(
    *,
    profile_path: str,
    extension_path: str,
    headless: bool = False,
    include_extension: bool = True,
    include_profile: bool = True,
    channel: str = "",
    executable_path: str = "",
    explicit_user_agent: str = "",
    randomize_fingerprint: bool = False,
) -> LaunchProfile:
    """Build a ``LaunchProfile`` for the Chromium session.

    Args:
        profile_path: Chrome profile directory, used when *include_profile*.
        extension_path: Unpacked extension directory, used when
            *include_extension*.
        headless: Run browser in headless mode.
        include_extension: Load the extension and disable all the others.
        include_profile: Run against *profile_path* instead of a temporary
            profile.
        channel: Playwright browser channel (``"chromium"``, ``"chrome"``).
        executable_path: Explicit Chromium binary.
        explicit_user_agent: Force this user-agent (overrides random).
        randomize_fingerprint: Randomize viewport, locale, timezone, etc.

    Returns:
        A ``LaunchProfile`` ready for Playwright.
    """
    profile = LaunchProfile()

    # --- Chromium flags ---
    profile.args.append(NO_SANDBOX_FLAG)

    if include_extension:
        profile.args.append(f"--disable-extensions-except={extension_path}")
        profile.args.append(f"--load-extension={extension_path}")

    if include_profile:
        profile.user_data_dir = profile_path

    # --- Launch kwargs ---
    kwargs = profile.launch_kwargs
    kwargs["headless"] = headless
    kwargs["chromium_sandbox"] = False
    if include_extension:
        # Playwright's default flag set would switch the extension back off.
        kwargs["ignore_default_args"] = [DISABLE_EXTENSIONS_FLAG]
    if channel:
        kwargs["channel"] = channel
    if executable_path:
        kwargs["executable_path"] = executable_path

    # User-agent
    if explicit_user_agent:
        kwargs["user_agent"] = explicit_user_agent
        profile.user_agent = explicit_user_agent
    elif randomize_fingerprint:
        ua = random.choice(_USER_AGENTS)
        kwargs["user_agent"] = ua
        profile.user_agent = ua

    # Viewport, locale + timezone
    if randomize_fingerprint:
        vp = random.choice(_VIEWPORTS)
        kwargs["viewport"] = vp
        profile.viewport = vp

        locale, tz = random.choice(_LOCALE_TIMEZONE_PAIRS)
        kwargs["locale"] = locale
        kwargs["timezone_id"] = tz
        profile.locale = locale
        profile.timezone_id = tz

    logger.debug(
        "Launch profile: flags=%s user_agent=%s viewport=%s locale=%s timezone=%s",
        profile.command_line,
        profile.user_agent or "(default)",
        profile.viewport or "(default)",
        profile.locale or "(default)",
        profile.timezone_id or "(default)",
    )
    return profile


async def apply_stealth_scripts(context) -> None:
    """Register the stealth JavaScript on a Playwright browser context.

    Call this **before** opening pages so the scripts execute in every
    frame from the start.

    Args:
        context: Playwright ``BrowserContext`` object.
    """
    await context.add_init_script(script=_STEALTH_SCRIPTS)
    logger.debug("Stealth scripts registered")
