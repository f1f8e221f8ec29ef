"""Command identifiers and the fixed pipeline definitions.

Each composite setup operation is a hard-coded, ordered list of
command names. Order is execution order; duplicates are not removed.
"""

from __future__ import annotations

from enum import StrEnum

from dropctl.config.models import CONFIG_SPLIT


class CommandName(StrEnum):
    """Built-in command identifiers, resolved through the registry."""

    SETUP = "setup"
    BUILD = "setup:build"
    HASH_SALT = "setup:hash-salt"
    DRUPAL_INSTALL = "setup:drupal:install"
    INSTALL_ALIAS = "install-alias"
    BEHAT = "setup:behat"
    COMPOSER_INSTALL = "setup:composer:install"
    GIT_HOOKS = "setup:git-hooks"
    SETTINGS = "setup:settings"
    SIMPLESAMLPHP_CONFIG = "simplesamlphp:build:config"
    INTERNAL_DRUPAL_INSTALL = "internal:drupal:install"
    CONFIG_IMPORT = "setup:config-import"


POST_SETUP_BUILD_HOOK = "post-setup-build"

SETUP_PIPELINE: tuple[str, ...] = (
    CommandName.BUILD,
    CommandName.HASH_SALT,
    CommandName.DRUPAL_INSTALL,
    CommandName.INSTALL_ALIAS,
)

# setup:composer:install must run before setup:settings so that
# scaffold files are present.
BUILD_PIPELINE: tuple[str, ...] = (
    CommandName.BEHAT,
    CommandName.COMPOSER_INSTALL,
    CommandName.GIT_HOOKS,
    CommandName.SETTINGS,
)


def install_pipeline(strategy: str | None) -> list[str]:
    """Return the install pipeline for a config-management *strategy*.

    Config import is appended only for the exact ``config-split`` value.

    Examples:
        >>> install_pipeline("config-split")
        ['internal:drupal:install', 'setup:config-import']
        >>> install_pipeline("none")
        ['internal:drupal:install']
    """
    commands: list[str] = [CommandName.INTERNAL_DRUPAL_INSTALL.value]
    if strategy == CONFIG_SPLIT:
        commands.append(CommandName.CONFIG_IMPORT.value)
    return commands
