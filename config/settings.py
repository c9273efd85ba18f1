"""LocSync – Application Configuration.

Loads from .env file or environment variables (prefix ``LOCSYNC_``).
"""

import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_cache_path() -> str:
    return str(Path(tempfile.gettempdir()) / "locsync-upstream-cache.json")


class Settings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Runtime ---
    log_level: str = "info"
    log_format: str = "console"  # 'console' for humans, 'json' for CI logs

    # --- Upstream translation platform ---
    crowd_base_url: str = "https://translate.example.org"
    crowd_project: str = "site"
    crowd_timeout: int = 30

    # --- Local locale files ---
    reference_language: str = "en"
    locales_dir: str = "locales"
    locale_file_extension: str = ".yml"

    # --- Cache / rules ---
    cache_path: str = _default_cache_path()
    rules_file: str = ""  # YAML override for the merge rule lists


def get_settings() -> Settings:
    """Factory function for settings singleton."""
    return Settings()
