"""nfbrowser test configuration — shared fixtures for unit and integration tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

# Resolve config/ against the checkout, also when the package is installed
# non-editable.
os.environ.setdefault("NF_PROJECT_ROOT", str(Path(__file__).resolve().parents[1]))


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PAGES_DIR = FIXTURES_DIR / "pages"


# ---------------------------------------------------------------------------
# Async
# ---------------------------------------------------------------------------


@pytest.fixture()
def anyio_backend() -> str:
    """Run ``@pytest.mark.anyio`` tests on asyncio only (Playwright needs it)."""
    return "asyncio"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Clear the settings LRU cache between tests."""
    from nfbrowser.settings.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fast_settings(monkeypatch):
    """Settings with every wait shortened to zero."""
    monkeypatch.delenv("NF_ENV", raising=False)
    from nfbrowser.settings.config import Settings

    return Settings(
        extension={"discovery_timeout_seconds": 0.0, "poll_interval_seconds": 0.0},
        profile={"creation_timeout_seconds": 0.0},
        filter_lists={"update_settle_seconds": 0.0},
    )


# ---------------------------------------------------------------------------
# HTML fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def article_page() -> Path:
    """Path to the article page used for extraction tests."""
    return PAGES_DIR / "article.html"


@pytest.fixture()
def settings_page_html() -> Path:
    """Path to the mock Adblock Plus options page."""
    return PAGES_DIR / "mock_abp_settings.html"


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that launch a real Chromium")
    config.addinivalue_line("markers", "slow: marks tests that take more than a few seconds")
