"""Locating and reading ``frontiermetrix.toml``.

A project is marked by the nearest ``frontiermetrix.toml`` at or above the
working directory. ``FRONTIERMETRIX_CONFIG`` names a file directly and turns
the search off.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "frontiermetrix.toml"
CONFIG_ENV_VAR = "FRONTIERMETRIX_CONFIG"

# (section, key) entries holding directories; relative values are anchored
# to the directory of the file they appear in.
_DIRECTORY_KEYS = (("data", "data_dir"), ("plugins", "local_dir"))


class ConfigError(Exception):
    """A config file exists but cannot be used."""


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest config file at or above *start* (default: cwd).

    When ``FRONTIERMETRIX_CONFIG`` is set it is the only candidate, so a
    missing file there means no config at all.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* into a settings table.

    Relative ``[data] data_dir`` and ``[plugins] local_dir`` values come back
    absolute, resolved against the file's own directory, so a config picked
    up from a parent directory still points at that project's data.

    Raises:
        ConfigError: the file is not valid TOML.
    """
    try:
        table: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc

    anchor = path.resolve().parent
    for section_name, key in _DIRECTORY_KEYS:
        section = table.get(section_name)
        if not isinstance(section, dict):
            continue
        value = section.get(key)
        if isinstance(value, str) and not Path(value).is_absolute():
            section[key] = str(anchor / value)
    return table
