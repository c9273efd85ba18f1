"""LocSync – Upstream snapshot cache.

Stores the flattened upstream data of every language as versioned JSON::

    {"version": 1,
     "languages": {"de": {"name": "German", "entries": {"site.title": "Hallo"}}}}

A hit bypasses all network access.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from locsync.core.errors import CacheError
from locsync.core.flatmap import FlatMap

logger = structlog.get_logger()

CACHE_VERSION = 1


@dataclass
class UpstreamSnapshot:
    """Flattened upstream data for one language."""
    code: str
    name: str = ""
    entries: FlatMap = field(default_factory=dict)


class UpstreamCache:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, UpstreamSnapshot] | None:
        """Return the cached snapshots, or None when there is no cache file."""
        if not self._path.exists():
            return None
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CacheError(f"Cannot read cache {self._path}: {e}") from e

        if not isinstance(data, dict) or data.get("version") != CACHE_VERSION:
            raise CacheError(
                f"Unsupported cache format in {self._path}; delete it to refetch"
            )
        languages = data.get("languages")
        if not isinstance(languages, dict):
            raise CacheError(f"Cache {self._path} has no language records")

        snapshots: dict[str, UpstreamSnapshot] = {}
        for code, record in languages.items():
            if not isinstance(record, dict) or not isinstance(record.get("entries"), dict):
                raise CacheError(f"Malformed cache record for '{code}'")
            snapshots[code] = UpstreamSnapshot(
                code=code,
                name=record.get("name", ""),
                entries=record["entries"],
            )
        logger.info("cache.hit", path=str(self._path), languages=len(snapshots))
        return snapshots

    def save(self, snapshots: dict[str, UpstreamSnapshot]) -> None:
        payload = {
            "version": CACHE_VERSION,
            "languages": {
                code: {"name": snap.name, "entries": snap.entries}
                for code, snap in sorted(snapshots.items())
            },
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".locsync-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("cache.saved", path=str(self._path), languages=len(snapshots))
