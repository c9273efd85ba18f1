"""LocSync – Pytest Configuration.

Shared fixtures for all tests.
"""

import os
import sys
from pathlib import Path

# Path fix for running from a plain checkout
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Keep developer .env / environment from leaking into tests
for _key in list(os.environ):
    if _key.startswith("LOCSYNC_"):
        del os.environ[_key]

import pytest
import yaml

from locsync.core.locales import Language
from locsync.storage.locale_files import LocaleStore


class FakeSource:
    """In-memory source provider recording every fetch."""

    def __init__(self, trees: dict, names: dict | None = None) -> None:
        self.trees = trees
        self.names = names or {}
        self.fetched: list[str] = []
        self.listed = 0

    def list_languages(self) -> list[Language]:
        self.listed += 1
        return [Language(code=c, name=self.names.get(c, "")) for c in self.trees]

    def fetch_tree(self, code: str):
        self.fetched.append(code)
        return self.trees[code]


@pytest.fixture
def locales_dir(tmp_path):
    d = tmp_path / "locales"
    d.mkdir()
    return d


@pytest.fixture
def store(locales_dir):
    return LocaleStore(locales_dir)


@pytest.fixture
def write_locale(locales_dir):
    """Write a YAML locale file into the destination directory."""
    def _write(filename: str, data) -> Path:
        path = locales_dir / filename
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def read_locale(locales_dir):
    def _read(filename: str):
        return yaml.safe_load((locales_dir / filename).read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def make_source():
    return FakeSource
