"""Tests for DropSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from dropctl.config.settings import DropSettings


class TestDropSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        monkeypatch.delenv("DROPCTL_CONFIG", raising=False)
        settings = DropSettings.from_cli(repo_root=tmp_path)
        assert settings.repo_root == tmp_path
        assert settings.config_path is None
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.project.site == "default"
        assert settings.project.docroot == "docroot"
        assert settings.cm.strategy == "none"
        assert settings.simplesamlphp is None
        assert settings.command_hooks == {}

    def test_frozen(self, tmp_path: Path) -> None:
        settings = DropSettings.from_cli(repo_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_derived_paths(self, tmp_path: Path) -> None:
        settings = DropSettings.from_cli(repo_root=tmp_path)
        assert settings.docroot_path == tmp_path / "docroot"
        assert settings.multisite_dir == tmp_path / "docroot" / "sites" / "default"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "dropctl.toml"
        toml.write_text('[project]\nsite = "intranet"\n[cm]\nstrategy = "config-split"\n')
        settings = DropSettings.from_cli(repo_root=tmp_path)
        assert settings.project.site == "intranet"
        assert settings.cm.strategy == "config-split"
        assert settings.project.docroot == "docroot"  # default preserved

    def test_top_level_sso_flag(self, tmp_path: Path) -> None:
        (tmp_path / "dropctl.toml").write_text("simplesamlphp = true\n")
        settings = DropSettings.from_cli(repo_root=tmp_path)
        assert settings.simplesamlphp is True

    def test_command_hooks(self, tmp_path: Path) -> None:
        (tmp_path / "dropctl.toml").write_text(
            '[command_hooks.post-setup-build]\ncommand = "npm run build"\ndir = "themes"\n'
        )
        settings = DropSettings.from_cli(repo_root=tmp_path)
        hook = settings.command_hooks["post-setup-build"]
        assert hook.command == "npm run build"
        assert hook.dir == "themes"

    def test_repo_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "dropctl.toml").write_text("")
        child = tmp_path / "docroot" / "modules"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        monkeypatch.delenv("DROPCTL_CONFIG", raising=False)
        settings = DropSettings.from_cli()
        assert settings.repo_root == tmp_path.resolve()

    def test_repo_root_from_composer_json_without_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "composer.json").write_text("{}")
        child = tmp_path / "docroot" / "themes"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        monkeypatch.delenv("DROPCTL_CONFIG", raising=False)
        settings = DropSettings.from_cli()
        assert settings.config_path is None
        assert settings.repo_root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[project]\nsite = "custom"\n')
        settings = DropSettings.from_cli(config_path=str(custom), repo_root=tmp_path)
        assert settings.project.site == "custom"
        assert settings.config_path == custom

    def test_invalid_toml_raises_click_exception(self, tmp_path: Path) -> None:
        (tmp_path / "dropctl.toml").write_text("[project\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            DropSettings.from_cli(repo_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "dropctl.toml").write_text('[composer]\nbin = "composer2"\n')
        monkeypatch.setenv("DROPCTL_COMPOSER__BIN", "/opt/bin/composer")
        settings = DropSettings.from_cli(repo_root=tmp_path)
        assert settings.composer.bin == "/opt/bin/composer"

    def test_cli_flags_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DROPCTL_QUIET", "false")
        settings = DropSettings.from_cli(repo_root=tmp_path, quiet=True)
        assert settings.quiet is True
