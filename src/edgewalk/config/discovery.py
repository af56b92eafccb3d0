"""Locate and read ``edgewalk.toml``.

The file in effect is, in order: the ``--config`` flag, the
``EDGEWALK_CONFIG`` variable, or the nearest ``edgewalk.toml`` from the
start directory upward.  A flag or variable naming a missing file is an
error, not a quiet fall back to defaults.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "edgewalk.toml"
CONFIG_ENV_VAR = "EDGEWALK_CONFIG"

# Top-level tables the settings model reads; anything else is a typo.
SECTIONS = frozenset({"store", "paging", "seed"})


class ConfigFileError(click.ClickException):
    """The config file is missing, unreadable, or has unknown tables."""


def locate_config(explicit: str | Path | None = None, start: Path | None = None) -> Path | None:
    """Return the config file to use, or None to run on defaults."""
    named = explicit or os.environ.get(CONFIG_ENV_VAR)
    if named:
        path = Path(named).expanduser()
        if not path.is_file():
            raise ConfigFileError(f"Config file not found: {path}")
        return path

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path | None) -> dict[str, Any]:
    """Parse *path* into its section tables (empty without a file)."""
    if path is None:
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(f"Invalid TOML in {path}: {exc}") from exc

    unknown = sorted(set(data) - SECTIONS)
    if unknown:
        raise ConfigFileError(
            f"Unknown table(s) in {path}: {', '.join(unknown)} "
            f"(expected {', '.join(sorted(SECTIONS))})"
        )
    return data
