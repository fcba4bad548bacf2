"""Static catalogs used when configuring Adblock Plus."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FilterList:
    """A filter-list subscription.

    Attributes:
        name: Display name, used for logging only.
        selector: Selector that matches the list's row in the settings table
            once it has been added.
        url: Where the list is downloaded from when it is missing.
    """

    name: str
    selector: str
    url: str


DEFAULT_FILTER_LISTS: tuple[FilterList, ...] = (
    FilterList(
        name="Easylist",
        selector='li[aria-label="EasyList"]',
        url="https://easylist-downloads.adblockplus.org/easylist.txt",
    ),
    FilterList(
        name="RoList",
        selector='li[aria-label="ROList+EasyList"]',
        url="https://easylist-downloads.adblockplus.org/rolist+easylist.txt",
    ),
    FilterList(
        name="ABP-anti-CV",
        selector='li[aria-label="ABP filters"]',
        url="https://easylist-downloads.adblockplus.org/abp-filters-anti-cv.txt",
    ),
)

# Settings-page toggles that enable the built-in anti-tracking lists.
ANTI_TRACKING_LABELS: tuple[str, ...] = (
    "Block additional tracking",
    "Block cookie warnings",
    "Block push notifications",
    "Block social media icons tracking",
)
