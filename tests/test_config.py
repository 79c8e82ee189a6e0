from __future__ import annotations

from pathlib import Path

import pytest

from music_organize.config import Settings, load_settings, normalize_extensions
from music_organize.metadata import DEFAULT_EXTENSIONS
from music_organize.models import ConfigError


def test_defaults_without_file() -> None:
    settings = load_settings(None)
    assert settings == Settings()
    assert settings.extensions == DEFAULT_EXTENSIONS
    assert ".mp3" in settings.extensions and ".flac" in settings.extensions


def test_loads_table(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    _ = path.write_text(
        '[music_organize]\nextensions = ["MP3", ".Flac", "mp3"]\nlog_path = "logs/run.log"\n',
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.extensions == (".mp3", ".flac")
    assert settings.log_path == Path("logs/run.log")


def test_missing_table_keeps_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    _ = path.write_text("[other]\nkey = 1\n", encoding="utf-8")
    assert load_settings(path) == Settings()


@pytest.mark.parametrize(
    "body",
    [
        "[music_organize]\nextensions = \".mp3\"\n",
        "[music_organize]\nextensions = []\n",
        "[music_organize]\nextensions = [1]\n",
        "[music_organize]\nlog_path = 3\n",
        "music_organize = 1\n",
        "not toml [",
    ],
)
def test_invalid_files_raise_config_error(tmp_path: Path, body: str) -> None:
    path = tmp_path / "config.toml"
    _ = path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        _ = load_settings(path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        _ = load_settings(tmp_path / "absent.toml")


def test_normalize_extensions_rejects_dots_only() -> None:
    with pytest.raises(ConfigError):
        _ = normalize_extensions(["."])
