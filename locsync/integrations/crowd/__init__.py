"""Crowd-translation platform integration package."""

from __future__ import annotations

import structlog
import yaml

from config.settings import Settings, get_settings
from locsync.core.errors import UpstreamFormatError
from locsync.core.locales import Language
from locsync.integrations.crowd.client import CrowdClient
from locsync.integrations.crowd.languages import parse_language_table
from locsync.storage.locale_files import load_locale_yaml

logger = structlog.get_logger()


def get_client(settings: Settings | None = None) -> CrowdClient:
    """Build a CrowdClient from the application settings."""
    settings = settings or get_settings()
    return CrowdClient(
        base_url=settings.crowd_base_url,
        project=settings.crowd_project,
        timeout=settings.crowd_timeout,
    )


class UpstreamSource:
    """Source provider: language listing and raw per-language trees."""

    def __init__(self, client: CrowdClient) -> None:
        self._client = client

    def list_languages(self) -> list[Language]:
        return parse_language_table(self._client.languages_page())

    def fetch_tree(self, code: str) -> object:
        """Fetch and parse the export for ``code``.

        The result is returned unchecked; shape validation happens in the
        orchestrator.
        """
        raw = self._client.export(code)
        try:
            return load_locale_yaml(raw)
        except yaml.YAMLError as e:
            logger.error("crowd.export.parse_failed", code=code, error=str(e))
            raise UpstreamFormatError(f"Export for '{code}' is not valid YAML: {e}") from e
