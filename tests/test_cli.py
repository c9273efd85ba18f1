"""Tests for the command line entry point."""

from unittest.mock import patch

import pytest
import structlog

from locsync import cli
from locsync.core.errors import FetchError


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    monkeypatch.setenv("LOCSYNC_CACHE_PATH", str(tmp_path / "upstream-cache.json"))
    return tmp_path / "upstream-cache.json"


@pytest.fixture
def fake_upstream(make_source):
    source = make_source({
        "de": {"de": {"site": {"title": "Titel"}}},
        "fr": {"fr": {"site": {"title": "Titre"}}},
    })
    with patch("locsync.cli.get_client"), patch("locsync.cli.UpstreamSource", return_value=source):
        yield source


def test_help_exits_zero(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--help"])
    assert excinfo.value.code == 0
    assert "--only-new" in capsys.readouterr().out


def test_missing_destination_shows_usage(tmp_path, capsys, fake_upstream):
    code = cli.main(["-d", str(tmp_path / "missing")])
    err = capsys.readouterr().err
    assert code == 2
    assert "Destination directory not found" in err
    assert "usage:" in err
    assert fake_upstream.listed == 0


def test_full_run(locales_dir, write_locale, read_locale, fake_upstream):
    write_locale("en.yml", {"en": {"site": {"title": "Title"}}})
    write_locale("de.yml", {"de": {"site": {"title": "Alt"}}})

    assert cli.main(["-d", str(locales_dir)]) == 0
    assert read_locale("de.yml") == {"de": {"site": {"title": "Titel"}}}
    assert read_locale("fr.yml") == {"fr": {"site": {"title": "Titre"}}}


def test_only_new(locales_dir, write_locale, read_locale, fake_upstream):
    write_locale("en.yml", {"en": {"site": {"title": "Title"}}})
    write_locale("de.yml", {"de": {"site": {"title": "Alt"}}})

    assert cli.main(["-d", str(locales_dir), "--only-new"]) == 0
    assert read_locale("de.yml") == {"de": {"site": {"title": "Alt"}}}
    assert read_locale("fr.yml") == {"fr": {"site": {"title": "Titre"}}}


def test_cache_flag_writes_cache(locales_dir, isolated_cache, fake_upstream):
    assert cli.main(["-d", str(locales_dir), "--cache"]) == 0
    assert isolated_cache.exists()


def test_no_cache_by_default(locales_dir, isolated_cache, fake_upstream):
    assert cli.main(["-d", str(locales_dir)]) == 0
    assert not isolated_cache.exists()


def test_sync_error_exits_nonzero(locales_dir, fake_upstream):
    with patch.object(fake_upstream, "fetch_tree", side_effect=FetchError("boom")):
        assert cli.main(["-d", str(locales_dir)]) == 1
    assert list(locales_dir.iterdir()) == []
