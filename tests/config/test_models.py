"""Tests for config section models."""

import pytest

from dropctl.config.models import CONFIG_SPLIT, CommandHookConfig, GitHooksConfig, ProjectConfig


class TestSectionModels:
    def test_project_defaults(self) -> None:
        cfg = ProjectConfig()
        assert cfg.site == "default"
        assert cfg.profile == "minimal"

    def test_frozen(self) -> None:
        cfg = ProjectConfig()
        with pytest.raises(Exception):
            cfg.site = "other"  # type: ignore[misc]

    def test_git_hook_defaults(self) -> None:
        assert GitHooksConfig().hooks == ["pre-commit", "commit-msg"]

    def test_command_hook_optional(self) -> None:
        hook = CommandHookConfig()
        assert hook.command is None
        assert hook.dir is None

    def test_config_split_literal(self) -> None:
        assert CONFIG_SPLIT == "config-split"
