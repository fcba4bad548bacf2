"""nfbrowser exception hierarchy.

Every exception carries an explicit ``kind`` so callers can branch on the
failure mode without matching on class names.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure modes raised by nfbrowser."""

    BROWSER_NOT_LAUNCHED = "browser_not_launched"
    EXTENSION_NOT_LOADED = "extension_not_loaded"
    DIRECTORY_NOT_FOUND = "directory_not_found"
    NO_ELEMENT_FOUND = "no_element_found"
    FUNCTION_ALREADY_EXPOSED = "function_already_exposed"
    NAVIGATION_FAILED = "navigation_failed"


class NFError(Exception):
    """Base exception for all nfbrowser errors."""

    kind: ErrorKind


# ---------------------------------------------------------------------------
# Browser-level errors
# ---------------------------------------------------------------------------


class BrowserError(NFError):
    """Raised for problems with the browser process or its configuration."""


class BrowserNotLaunchedError(BrowserError):
    """Raised when an operation needs a live browser and none was launched."""

    kind = ErrorKind.BROWSER_NOT_LAUNCHED

    def __init__(self) -> None:
        super().__init__("Browser not launched. Run `session.launch()` first.")


class ExtensionNotLoadedError(BrowserError):
    """Raised when the extension's background page never showed up.

    Attributes:
        title: The background page title that was being looked for.
    """

    kind = ErrorKind.EXTENSION_NOT_LOADED

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"Extension was not loaded (no background page titled {title!r})")


class DirectoryNotFoundError(BrowserError):
    """Raised when a required directory (extension, profile) is missing.

    Attributes:
        path: The missing directory.
    """

    kind = ErrorKind.DIRECTORY_NOT_FOUND

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Could not find directory: "{path}"!')


# ---------------------------------------------------------------------------
# Page-level errors
# ---------------------------------------------------------------------------


class PageError(NFError):
    """Base class for errors tied to a specific page.

    Attributes:
        url: URL of the page the error happened on.
    """

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"Error on page {url} - {message}")


class NoElementFoundError(PageError):
    """Raised when a selector matched no element but at least one was required."""

    kind = ErrorKind.NO_ELEMENT_FOUND

    def __init__(self, url: str, selector: str) -> None:
        self.selector = selector
        super().__init__(url, f"No elements found for selector: {selector}")


class FunctionAlreadyExposedError(PageError):
    """Raised when re-exposing a page function with ``exists_ok=False``."""

    kind = ErrorKind.FUNCTION_ALREADY_EXPOSED

    def __init__(self, url: str, func_name: str) -> None:
        self.func_name = func_name
        super().__init__(url, f'Function already exposed: "{func_name}"')


class NavigationError(PageError):
    """Raised when navigation fails for a reason that waiting will not fix.

    Attributes:
        reason: Short human readable reason (``"name not resolved"``).
    """

    kind = ErrorKind.NAVIGATION_FAILED

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"Navigation failed: {reason}")
