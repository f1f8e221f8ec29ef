"""Tests for the root CLI group and global flags."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from dropctl import __version__
from dropctl.cli import cli

SETUP_COMMANDS = (
    "setup",
    "setup:all",
    "setup:build",
    "setup:drupal:install",
    "setup:behat",
    "setup:composer:install",
    "setup:git-hooks",
    "setup:settings",
    "setup:hash-salt",
    "setup:config-import",
    "install-alias",
    "simplesamlphp:build:config",
    "internal:drupal:install",
    "step",
)


class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "build orchestration" in result.output

    @pytest.mark.parametrize("name", SETUP_COMMANDS)
    def test_commands_registered(self, name: str) -> None:
        assert name in cli.commands

    def test_setup_all_is_alias(self) -> None:
        assert cli.commands["setup:all"] is cli.commands["setup"]

    @pytest.mark.parametrize("name", ["setup", "setup:build", "setup:drupal:install"])
    def test_subcommand_help(self, cli_runner: CliRunner, name: str) -> None:
        result = cli_runner.invoke(cli, [name, "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output

    def test_build_help_lists_steps_in_order(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["setup:build", "--help"])
        assert result.exit_code == 0
        assert "Steps:" in result.output
        behat = result.output.index("setup:behat")
        composer = result.output.index("setup:composer:install")
        settings = result.output.index("setup:settings")
        assert behat < composer < settings

    def test_install_help_lists_permissions_step(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["setup:drupal:install", "--help"])
        assert result.exit_code == 0
        assert "internal:drupal:install" in result.output
        assert "site directory permissions" in result.output

    def test_atomic_step_help_has_no_steps(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["setup:hash-salt", "--help"])
        assert result.exit_code == 0
        assert "Steps:" not in result.output

    def test_examples_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["setup:build", "--examples"])
        assert result.exit_code == 0
        assert "dropctl -v setup:build" in result.output

    def test_invalid_toml(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "dropctl.toml").write_text("[project\n")
        result = cli_runner.invoke(cli, ["step", "--list"])
        assert result.exit_code != 0
        assert "Invalid TOML" in result.output

    def test_explicit_config_path(
        self, cli_runner: CliRunner, project_root: Path, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        elsewhere = tmp_path_factory.mktemp("elsewhere")
        with cli_runner.isolated_filesystem(temp_dir=elsewhere):
            result = cli_runner.invoke(
                cli, ["--json", "-c", str(project_root / "dropctl.toml"), "setup:hash-salt"]
            )
        assert result.exit_code == 0, result.output
        assert (project_root / "salt.txt").is_file()
