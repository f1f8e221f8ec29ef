"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``DROPCTL_*`` prefix
  3. TOML file    — ``dropctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`dropctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from dropctl.config.discovery import find_config, find_project_root
from dropctl.config.models import (
    AliasConfig,
    BehatConfig,
    CmConfig,
    CommandHookConfig,
    ComposerConfig,
    DbConfig,
    DrushConfig,
    GitHooksConfig,
    PluginsConfig,
    ProjectConfig,
    SamlConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``dropctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class DropSettings(BaseSettings):
    """Unified settings for the dropctl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        repo_root: Project repository root (parent of ``dropctl.toml``,
            or of the nearest ``composer.json`` when there is no config).
        config_path: Resolved config file, or None when running on defaults.
        simplesamlphp: Optional SSO flag. The SAML config step only runs
            when this is present and truthy.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DROPCTL_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML — derived from config location) ---
    repo_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    cm: CmConfig = Field(default_factory=CmConfig)
    db: DbConfig = Field(default_factory=DbConfig)
    composer: ComposerConfig = Field(default_factory=ComposerConfig)
    drush: DrushConfig = Field(default_factory=DrushConfig)
    git: GitHooksConfig = Field(default_factory=GitHooksConfig)
    behat: BehatConfig = Field(default_factory=BehatConfig)
    alias: AliasConfig = Field(default_factory=AliasConfig)
    saml: SamlConfig = Field(default_factory=SamlConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    command_hooks: dict[str, CommandHookConfig] = Field(default_factory=dict)
    simplesamlphp: bool | None = None

    @property
    def docroot_path(self) -> Path:
        """Absolute document root."""
        return self.repo_root / self.project.docroot

    @property
    def multisite_dir(self) -> Path:
        """Per-site directory: ``{docroot}/sites/{site}``."""
        return self.docroot_path / "sites" / self.project.site

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        repo_root: Path | None = None,
        **cli_flags: Any,
    ) -> DropSettings:
        """Construct settings from CLI invocation.

        Discovers ``dropctl.toml`` via walk-up (or explicit *config_path*),
        resolves *repo_root* from the config file's parent directory (or the
        enclosing Composer project), and merges CLI flags as
        highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(repo_root)

        resolved_root = repo_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else find_project_root()

        _tls.toml_path = toml_path
        try:
            return cls(
                repo_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
