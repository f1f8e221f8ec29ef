"""Locate the project a command runs against.

``dropctl.toml`` marks the repository root. Without one, the nearest
directory holding ``composer.json`` is taken as the root, so a fresh
Drupal checkout works on defaults. ``DROPCTL_CONFIG`` pins the config
file and disables the search.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "dropctl.toml"
CONFIG_ENV_VAR = "DROPCTL_CONFIG"
PROJECT_MARKER = "composer.json"


def _ancestors(start: Path | None) -> Iterator[Path]:
    here = (start or Path.cwd()).resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """``$DROPCTL_CONFIG`` if set, else the nearest ``dropctl.toml`` at or above *start*."""
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned).expanduser()
        return path if path.is_file() else None
    for directory in _ancestors(start):
        if (directory / CONFIG_FILENAME).is_file():
            return directory / CONFIG_FILENAME
    return None


def find_project_root(start: Path | None = None) -> Path:
    """Nearest directory at or above *start* with a ``composer.json``.

    Falls back to *start* (default: cwd) when no Composer project is found.
    """
    for directory in _ancestors(start):
        if (directory / PROJECT_MARKER).is_file():
            return directory
    return (start or Path.cwd()).resolve()
