"""nfbrowser — Chromium automation for Adblock Plus setup and page scraping."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("nfbrowser")
except Exception:
    __version__ = "0.0.0"
