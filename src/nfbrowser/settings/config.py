"""Configuration loader for nfbrowser using Pydantic settings.

Config precedence (highest wins):
  1. Explicit values / CLI flags
  2. Environment variables (NF_* with __ for nesting)
  3. settings.local.toml
  4. settings.<env>.toml
  5. settings.default.toml
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("NF_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "NF_ENV"
DEFAULT_ENV = "local"


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class BrowserSettings(BaseSettings):
    """Playwright browser settings."""

    model_config = SettingsConfigDict(env_prefix="NF_BROWSER__")

    headless: bool = False
    timeout_ms: int = 30_000
    channel: str = ""  # e.g. "chromium" for headless runs with extensions
    executable_path: str = ""
    wait_until: str = "networkidle"


class ExtensionSettings(BaseSettings):
    """Adblock Plus extension location and discovery."""

    model_config = SettingsConfigDict(env_prefix="NF_EXTENSION__")

    path: str = "abp-3.12"
    background_title: str = "Adblock Plus - free ad blocker"
    settings_page: str = "desktop-options.html"
    discovery_timeout_seconds: float = 3.0
    poll_interval_seconds: float = 0.25


class ProfileSettings(BaseSettings):
    """Chrome profile (user data directory) settings."""

    model_config = SettingsConfigDict(env_prefix="NF_PROFILE__")

    path: str = "chrome-profile"
    creation_timeout_seconds: float = 2.0


class FilterListSettings(BaseSettings):
    """Filter-list maintenance settings."""

    model_config = SettingsConfigDict(env_prefix="NF_FILTER_LISTS__")

    update_settle_seconds: float = 5.0


class StealthSettings(BaseSettings):
    """Anti-detection / stealth configuration."""

    model_config = SettingsConfigDict(env_prefix="NF_STEALTH__")

    apply_stealth_scripts: bool = True
    randomize_fingerprint: bool = False
    user_agent: str = ""


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root nfbrowser settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="NF_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(default_factory=_resolve_env)
    project_root: Path = Field(default=PROJECT_ROOT)

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    extension: ExtensionSettings = Field(default_factory=ExtensionSettings)
    profile: ProfileSettings = Field(default_factory=ProfileSettings)
    filter_lists: FilterListSettings = Field(default_factory=FilterListSettings)
    stealth: StealthSettings = Field(default_factory=StealthSettings)

    @model_validator(mode="before")
    @classmethod
    def _merge_toml_files(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer TOML config files before env var overrides."""
        defaults = _load_toml(CONFIG_DIR / "settings.default.toml")
        env_name = (values.get("env") or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()
        env_overrides = _load_toml(CONFIG_DIR / f"settings.{env_name}.toml")
        local_overrides = _load_toml(CONFIG_DIR / "settings.local.toml")

        # Merge: defaults < env-specific < local < explicit values
        merged: dict[str, Any] = {}
        for layer in (defaults, env_overrides, local_overrides, values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Normalize relative paths against project_root."""
        root = self.project_root
        if not Path(self.extension.path).is_absolute():
            self.extension.path = str(root / self.extension.path)
        if not Path(self.profile.path).is_absolute():
            self.profile.path = str(root / self.profile.path)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
