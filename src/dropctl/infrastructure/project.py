"""Project — the single dependency injected into every service and step.

Owns the resolved settings, the subprocess runner, and the optional
plugin manager. Collaborators are created lazily so ``--help`` never
touches the filesystem or loads plugins.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from dropctl.infrastructure.process import ProcessRunner, detect_interactive

if TYPE_CHECKING:
    from dropctl.config.settings import DropSettings
    from dropctl.plugins.manager import PluginManager


class Project:
    """A Drupal project checkout described by :class:`DropSettings`."""

    def __init__(
        self,
        settings: DropSettings,
        *,
        process: ProcessRunner | None = None,
    ) -> None:
        self._settings = settings
        self._process = process
        self._plugins: PluginManager | None = None

    @property
    def settings(self) -> DropSettings:
        return self._settings

    @property
    def root(self) -> Path:
        """Repository root."""
        return self._settings.repo_root

    @property
    def docroot(self) -> Path:
        return self._settings.docroot_path

    @property
    def multisite_dir(self) -> Path:
        return self._settings.multisite_dir

    @property
    def interactive(self) -> bool:
        return self.process.interactive

    @property
    def process(self) -> ProcessRunner:
        """Subprocess runner (created lazily on first access)."""
        if self._process is None:
            self._process = ProcessRunner(
                interactive=detect_interactive(no_interact=self._settings.no_interact),
                quiet=self._settings.quiet,
            )
        return self._process

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugins

    def init_plugins(self) -> PluginManager:
        """Discover entry-point and local plugins.

        Called by AppContext when the project is first accessed.
        """
        from dropctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load(local_dir=self.resolve(self._settings.plugins.local_dir))
        self._plugins = pm
        return pm

    def use_plugins(self, pm: PluginManager) -> None:
        """Attach an already-configured plugin manager."""
        self._plugins = pm

    def resolve(self, path: str) -> Path:
        """Resolve a config path: ``~`` is expanded, relatives anchor at the root."""
        p = Path(path).expanduser()
        if p.is_absolute():
            return p
        return self.root / p
