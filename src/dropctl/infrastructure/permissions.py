"""Permission normalization for a multisite directory.

Only the direct children of the site directory are touched. The
``files`` directory (user uploads, owned by the web server) is left
alone, as is everything below depth 0.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import structlog

from dropctl.domain.errors import SitePermissionError

DIR_MODE = 0o755
FILE_MODE = 0o644
DEFAULT_EXCLUDE = "files"

logger = structlog.get_logger(__name__)


class EntryKind(StrEnum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileSystemEntry:
    """A direct child of the scanned root."""

    path: Path
    kind: EntryKind
    depth: int = 0


@dataclass
class PermissionReport:
    """Paths whose mode was set by a normalization pass."""

    directories: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "directories": [str(p) for p in self.directories],
            "files": [str(p) for p in self.files],
        }


def _path_chmod(path: Path, mode: int) -> None:
    path.chmod(mode)


def scan_entries(root: Path, exclude: str) -> list[FileSystemEntry]:
    """List depth-0 entries of *root*, minus any named exactly *exclude*."""
    entries: list[FileSystemEntry] = []
    for child in sorted(root.iterdir()):
        if child.name == exclude:
            continue
        if child.is_dir():
            entries.append(FileSystemEntry(child, EntryKind.DIRECTORY))
        elif child.is_file():
            entries.append(FileSystemEntry(child, EntryKind.FILE))
    return entries


class PermissionNormalizer:
    """Apply fixed modes to the top level of a site directory.

    Directories get ``0755`` and files ``0644``. All operations are
    collected first and then executed in order; the first failure
    aborts the batch with :class:`SitePermissionError`. Nothing is
    rolled back.

    *verbose* controls per-entry logging only.
    """

    def __init__(
        self,
        chmod: Callable[[Path, int], None] | None = None,
        *,
        verbose: bool = False,
    ) -> None:
        self._chmod = chmod or _path_chmod
        self._verbose = verbose

    def plan(self, root: Path, exclude: str = DEFAULT_EXCLUDE) -> list[tuple[Path, int]]:
        """Return the ``(path, mode)`` operations for *root* without applying them."""
        if not root.is_dir():
            msg = f"Multisite directory not found: {root}"
            raise SitePermissionError(msg)
        try:
            entries = scan_entries(root, exclude)
        except OSError as exc:
            logger.error("permissions.scan_failed", root=str(root))
            msg = f"Unable to read multisite directory {root}: {exc}"
            raise SitePermissionError(msg) from exc
        dirs = [(e.path, DIR_MODE) for e in entries if e.kind is EntryKind.DIRECTORY]
        files = [(e.path, FILE_MODE) for e in entries if e.kind is EntryKind.FILE]
        return dirs + files

    def normalize(self, root: Path, exclude: str = DEFAULT_EXCLUDE) -> PermissionReport:
        """Set directory and file modes under *root*, skipping *exclude*."""
        operations = self.plan(root, exclude)
        report = PermissionReport()
        for path, mode in operations:
            try:
                self._chmod(path, mode)
            except OSError as exc:
                logger.error("permissions.chmod_failed", path=str(path), mode=oct(mode))
                msg = f"Unable to set permissions for site directories: {path}: {exc}"
                raise SitePermissionError(msg) from exc
            if self._verbose:
                logger.debug("permissions.chmod", path=str(path), mode=oct(mode))
            if mode == DIR_MODE:
                report.directories.append(path)
            else:
                report.files.append(path)
        logger.info(
            "permissions.normalized",
            root=str(root),
            directories=len(report.directories),
            files=len(report.files),
        )
        return report
