"""LocSync – Locale file store.

One YAML file per language in a destination directory, named after the
language code with an uppercased region (``pt-BR.yml``). Lookups are
case-insensitive on the file stem.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
import yaml

from locsync.core.errors import LocaleFileError
from locsync.core.flatmap import Tree

logger = structlog.get_logger()

_BOOL_TAG = "tag:yaml.org,2002:bool"


class LocaleLoader(yaml.SafeLoader):
    """SafeLoader that keeps yes/no/on/off/true/false as text.

    Locale keys such as `no:` (Norwegian, or an answer option) must not
    turn into booleans.
    """


LocaleLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_locale_yaml(stream: Any) -> Any:
    """Parse locale YAML from a string or file object."""
    return yaml.load(stream, Loader=LocaleLoader)


class LocaleStore:
    """Reads and writes per-language locale files."""

    def __init__(self, directory: str | Path, extension: str = ".yml") -> None:
        self._dir = Path(directory)
        self._ext = extension if extension.startswith(".") else f".{extension}"

    @property
    def directory(self) -> Path:
        return self._dir

    def exists(self) -> bool:
        return self._dir.is_dir()

    def path_for(self, dest_code: str) -> Path:
        return self._dir / f"{dest_code}{self._ext}"

    def existing_files(self) -> dict[str, Path]:
        """Map lowercase language code -> file path for every locale file."""
        files: dict[str, Path] = {}
        for path in sorted(self._dir.iterdir()):
            if path.is_file() and path.suffix.lower() == self._ext.lower():
                files[path.stem.lower()] = path
        return files

    def find(self, dest_code: str) -> Path | None:
        return self.existing_files().get(dest_code.lower())

    def load(self, path: Path) -> Any:
        """Parse ``path``; raises LocaleFileError on YAML errors or non-mapping content."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = load_locale_yaml(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error("locale_files.load_failed", path=str(path), error=str(e))
            raise LocaleFileError(f"Cannot read locale file {path}: {e}") from e
        if not isinstance(data, dict):
            raise LocaleFileError(f"Locale file {path} does not contain a mapping")
        return data

    def write(self, dest_code: str, tree: Tree) -> Path:
        """Write ``tree`` to the file for ``dest_code``, replacing any previous content."""
        path = self.path_for(dest_code)
        stale = self.find(dest_code)
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=".locsync-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    tree,
                    f,
                    allow_unicode=True,
                    default_flow_style=False,
                    sort_keys=True,
                    width=4096,
                )
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        if stale is not None and stale.name != path.name and not stale.samefile(path):
            # Differently-cased file for the same language.
            stale.unlink()
        logger.info("locale_files.written", path=str(path))
        return path
