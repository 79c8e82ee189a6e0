"""Run settings, optionally loaded from a TOML file.

The file holds a single ``[music_organize]`` table::

    [music_organize]
    extensions = [".mp3", ".flac"]
    log_path = "~/logs/music-organize.log"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from .metadata import DEFAULT_EXTENSIONS
from .models import ConfigError


CONFIG_TABLE = "music_organize"


@dataclass(frozen=True)
class Settings:
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    log_path: Optional[Path] = None


def normalize_extensions(values: Iterable[Any]) -> tuple[str, ...]:
    extensions: list[str] = []
    for value in values:
        if not isinstance(value, str) or not value.strip(".").strip():
            raise ConfigError(f"invalid extension: {value!r}")
        ext = "." + value.strip().lstrip(".").lower()
        if ext not in extensions:
            extensions.append(ext)
    if not extensions:
        raise ConfigError("at least one extension is required")
    return tuple(extensions)


def load_settings(path: Optional[Path] = None) -> Settings:
    if path is None:
        return Settings()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] must be a table")

    extensions = DEFAULT_EXTENSIONS
    if "extensions" in table:
        raw = table["extensions"]
        if not isinstance(raw, list):
            raise ConfigError("extensions must be a list of strings")
        extensions = normalize_extensions(raw)

    log_path = table.get("log_path")
    if log_path is not None and not isinstance(log_path, str):
        raise ConfigError("log_path must be a string")

    return Settings(
        extensions=extensions,
        log_path=Path(log_path).expanduser() if log_path else None,
    )
