"""Text, attribute, HTML and link extraction from a loaded page.

``BrowserPage`` wraps a Playwright ``Page`` and resolves selectors against
the current document.  The heavy lifting (DOM traversal, ``innerText``) runs
in the page through ``ElementHandle.evaluate``; filtering, normalisation and
whitespace cleanup happen on the Python side.
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any, Callable, Iterable
from urllib.parse import urljoin, urlsplit

from playwright.async_api import Error as PlaywrightError

from nfbrowser.browser import navigation
from nfbrowser.exceptions import FunctionAlreadyExposedError, NoElementFoundError
from nfbrowser.utils.text import collapse_separators

if TYPE_CHECKING:
    from playwright.async_api import ElementHandle, Page

logger = logging.getLogger(__name__)

# Removes every descendant matching one of the ignore selectors, then returns
# the remaining rendered text.  Matched subtrees are dropped whole, so the
# walk never descends into a node it has removed.
_CLEAN_TEXT_JS = """
(root, ignore) => {
    function cleanup(element) {
        for (const child of Array.from(element.children)) {
            if (ignore.some((sel) => child.matches(sel))) {
                child.remove();
                continue;
            }
            cleanup(child);
        }
    }
    if (ignore && ignore.length) cleanup(root);
    return root.innerText || '';
}
"""

# Values of the requested attributes, in request order, skipping absent ones.
_ATTRIBUTES_JS = """
(element, names) => names
    .map((name) => element.getAttribute(name))
    .filter((value) => value !== null)
"""

# Raw href values of every descendant anchor, in document order.
_HREFS_JS = """
(element) => Array.from(element.querySelectorAll('a'))
    .map((a) => a.getAttribute('href'))
    .filter((href) => href !== null)
"""

_OUTER_HTML_JS = "(element) => element.outerHTML"
_REMOVE_JS = "(element) => element.remove()"

# Names bound with expose_function, per Playwright page. Playwright keeps its
# bindings on the page, so every wrapper around the same page shares them.
_EXPOSED_NAMES: weakref.WeakKeyDictionary[Page, set[str]] = weakref.WeakKeyDictionary()
_ALREADY_REGISTERED = "has been already registered"


def _as_list(values: Iterable[str] | str | None) -> list[str]:
    """Turn *values* into a list, treating a lone string as one item."""
    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    return list(values)


class BrowserPage:
    """A loaded document plus the extraction operations nfbrowser needs.

    Args:
        page: Playwright ``Page`` object representing the loaded document.
        timeout_ms: Timeout used for reloads.
    """

    def __init__(self, page: Page, *, timeout_ms: int = 30_000) -> None:
        self.page = page
        self._timeout_ms = timeout_ms

    # ------------------------------------------------------------------
    # Page information
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        """The current URL of the page."""
        return self.page.url

    @property
    def origin(self) -> str:
        """Scheme plus host of the current URL, or ``""`` when there is none."""
        parts = urlsplit(self.url)
        if not parts.scheme or not parts.netloc:
            return ""
        return f"{parts.scheme}://{parts.netloc}"

    # ------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------

    async def get_handle_single(self, selector: str) -> ElementHandle:
        """Return the first element matching *selector*.

        Raises:
            NoElementFoundError: If nothing matches.
        """
        handle = await self.page.query_selector(selector)
        if handle is None:
            raise NoElementFoundError(self.url, selector)
        return handle

    async def get_handles_all(self, selector: str) -> list[ElementHandle]:
        """Return every element matching *selector* (possibly none)."""
        return await self.page.query_selector_all(selector)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def _extract_text_from_handle(self, handle: ElementHandle, ignore: Iterable[str] | str | None) -> str:
        text = await handle.evaluate(_CLEAN_TEXT_JS, _as_list(ignore))
        return collapse_separators(text)

    async def extract_text(self, selector: str, ignore: Iterable[str] | str | None = None) -> str:
        """Extract the text under *selector*, skipping elements matching *ignore*.

        Note that ignored elements are removed from the live document; call
        :meth:`refresh` to get a pristine copy back.

        Args:
            selector: Selector for the region to extract the text from.
            ignore: Selectors of elements to leave out. ``None`` keeps
                everything.

        Returns:
            The text with whitespace collapsed.

        Raises:
            NoElementFoundError: If no element matches *selector*.
        """
        handle = await self.get_handle_single(selector)
        return await self._extract_text_from_handle(handle, ignore)

    async def extract_text_multiple(
        self,
        selector: str,
        ignore: Iterable[str] | str | None = None,
        separator: str = " ",
    ) -> str:
        """Extract and join the text of every element matching *selector*.

        Args:
            selector: Selector used to extract the text.
            ignore: Selectors of elements to leave out.
            separator: String placed between the text of consecutive elements.

        Returns:
            The joined text, in document order.

        Raises:
            NoElementFoundError: If no element matches *selector*.
        """
        handles = await self.get_handles_all(selector)
        if not handles:
            raise NoElementFoundError(self.url, selector)

        ignore = _as_list(ignore)
        sections = [await self._extract_text_from_handle(handle, ignore) for handle in handles]
        return separator.join(sections)

    async def extract_attributes(self, selector: str, attributes: Iterable[str] | str | None) -> str | list[str] | None:
        """Extract attribute values from the element matching *selector*.

        Attributes missing on the element are skipped.

        Returns:
            The value itself if exactly one attribute was found, otherwise a
            list of the values found (possibly empty). ``None`` when
            *attributes* is ``None``.

        Raises:
            NoElementFoundError: If no element matches *selector*.
        """
        handle = await self.get_handle_single(selector)
        if attributes is None:
            return None

        values: list[str] = await handle.evaluate(_ATTRIBUTES_JS, _as_list(attributes))
        if len(values) == 1:
            return values[0]
        return values

    async def extract_links(self, selector: str, ignore: Iterable[str] | str | None = None) -> list[str]:
        """Extract the links from the subtree rooted at *selector*.

        Root-relative links (``/path``) are made absolute against the page
        origin; fragment links (``#anchor``) are prefixed with the page URL.

        Args:
            selector: Selector of the root of the subtree.
            ignore: Links to drop, compared against the raw ``href`` value.

        Returns:
            The links in document order.

        Raises:
            NoElementFoundError: If no element matches *selector*.
        """
        handle = await self.get_handle_single(selector)
        hrefs: list[str] = await handle.evaluate(_HREFS_JS)

        skip = set(_as_list(ignore))
        return [self._normalize_link(href) for href in hrefs if href not in skip]

    def _normalize_link(self, link: str) -> str:
        if link.startswith("/"):
            origin = self.origin
            if origin:
                return urljoin(origin, link)
            return link
        if link.startswith("#"):
            return f"{self.url}{link}"
        return link

    async def extract_html(self, selector: str) -> str:
        """Return the outer HTML of the element matching *selector*.

        Raises:
            NoElementFoundError: If no element matches *selector*.
        """
        handle = await self.get_handle_single(selector)
        return await handle.evaluate(_OUTER_HTML_JS)

    # ------------------------------------------------------------------
    # Page context
    # ------------------------------------------------------------------

    async def expose_function(self, func_name: str, func: Callable[..., Any], exists_ok: bool = True) -> None:
        """Expose *func* to the page's scripts as ``window[func_name]``.

        Args:
            func_name: Name the function will have in the page context.
            func: The Python callable to expose.
            exists_ok: Silently keep the existing binding when the name is
                already taken; otherwise raise.

        Raises:
            FunctionAlreadyExposedError: If the name is taken and
                *exists_ok* is ``False``.
        """
        exposed = _EXPOSED_NAMES.setdefault(self.page, set())
        if func_name not in exposed:
            try:
                await self.page.expose_function(func_name, func)
            except PlaywrightError as exc:
                # Bound by someone who bypassed this wrapper (context binding, raw page).
                if _ALREADY_REGISTERED not in str(exc):
                    raise
            else:
                exposed.add(func_name)
                logger.debug("Exposed %s on %s", func_name, self.url)
                return
            exposed.add(func_name)

        if not exists_ok:
            raise FunctionAlreadyExposedError(self.url, func_name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def remove_all_iframes(self) -> None:
        """Remove every iframe from the document."""
        for handle in await self.get_handles_all("iframe"):
            await handle.evaluate(_REMOVE_JS)

    async def refresh(self) -> None:
        """Reload the page and wait for the network to go idle.

        Useful after extraction with ``ignore`` selectors, which edits the DOM.
        """
        await navigation.reload(self.page, timeout_ms=self._timeout_ms)

    async def close(self) -> None:
        """Close the page, going through ``about:blank`` first to free memory."""
        await self.page.goto("about:blank")
        await self.page.close()
