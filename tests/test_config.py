"""Tests for settings loading and saving."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ctfexport.config import ExportSettings, load_settings, save_settings
from ctfexport.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CONTENTFUL_MANAGEMENT_TOKEN", "CONTENTFUL_SPACE_ID", "CONTENTFUL_ENVIRONMENT_ID"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for load_settings and save_settings."""

    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.json"
        save_settings(ExportSettings(cma_token="tok", space_id="space", env_id="dev"), path)

        settings = load_settings(path)

        assert settings == ExportSettings(cma_token="tok", space_id="space", env_id="dev")

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"cma_token": "file", "space_id": "space"}))
        monkeypatch.setenv("CONTENTFUL_MANAGEMENT_TOKEN", "env")

        settings = load_settings(path)

        assert settings.cma_token == "env"
        assert settings.space_id == "space"
        assert settings.env_id == "master"

    def test_missing_credentials(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Missing Contentful token"):
            load_settings(tmp_path / "absent.json")

    def test_missing_credentials_allowed(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "absent.json", require=False) == ExportSettings()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Unable to read config file"):
            load_settings(path)
