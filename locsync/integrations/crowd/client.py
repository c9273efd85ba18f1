"""Crowd-translation platform client.

Two resources are used:
  - languages: HTML page listing every language of the project
  - export:    per-language YAML export of the project's translations

No retries: a failed request aborts the run.
"""
from __future__ import annotations

import requests
import structlog

from locsync.core.errors import FetchError

logger = structlog.get_logger()


class CrowdClient:
    """Low-level platform client.

    Every public method corresponds to exactly one HTTP call and returns
    the raw response text. Parsing belongs to the callers.
    """

    def __init__(self, base_url: str, project: str, timeout: int = 30):
        self.base_url = base_url.rstrip("/")
        self.project = project
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "text/html, application/x-yaml, text/yaml, */*",
            "User-Agent": "locsync",
        })

    def _raise_with_body(self, r: requests.Response) -> None:
        """Raise FetchError with the response body included."""
        try:
            r.raise_for_status()
        except requests.HTTPError as e:
            body = r.text[:500] if r.text else ""
            raise FetchError(f"{e} — Body: {body}") from e

    def _get_text(self, path: str) -> str:
        url = f"{self.base_url}{path}"
        logger.info("crowd.fetch.start", url=url)
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("crowd.fetch.failed", url=url, error=str(e))
            raise FetchError(f"GET {url} failed: {e}") from e
        self._raise_with_body(r)
        # Exports are UTF-8 but served as text/* without a charset.
        r.encoding = "utf-8"
        return r.text

    # ─── Languages ───────────────────────────────────────────────────

    def languages_page(self) -> str:
        """GET /projects/{project}/languages  (HTML table)"""
        return self._get_text(f"/projects/{self.project}/languages")

    # ─── Export ──────────────────────────────────────────────────────

    def export(self, code: str) -> str:
        """GET /projects/{project}/export/{code}.yml"""
        return self._get_text(f"/projects/{self.project}/export/{code}.yml")
