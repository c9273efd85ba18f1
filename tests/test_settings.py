from pathlib import Path

from config.settings import Settings, get_settings


def test_defaults() -> None:
    settings = get_settings()
    assert settings.reference_language == "en"
    assert settings.locales_dir == "locales"
    assert settings.locale_file_extension == ".yml"
    assert Path(settings.cache_path).name == "locsync-upstream-cache.json"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LOCSYNC_REFERENCE_LANGUAGE", "de")
    monkeypatch.setenv("LOCSYNC_CROWD_TIMEOUT", "5")

    settings = get_settings()
    assert settings.reference_language == "de"
    assert settings.crowd_timeout == 5


def test_only_sync_settings_declared() -> None:
    assert "environment" not in Settings.model_fields
    assert not hasattr(Settings(), "is_production")
