"""Subcommand modules for dropctl.

Provides register_commands(), which attaches every command to the root
group. Names contain colons (``setup:build``) to match the commands
invoked inside pipelines.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the setup commands, the ``setup:all`` alias, and step commands."""
    from dropctl.commands.setup import STEP_COMMANDS, build, drupal_install, setup, step

    cli.add_command(setup)
    cli.add_command(setup, name="setup:all")
    cli.add_command(build)
    cli.add_command(drupal_install)
    cli.add_command(step)

    for command in STEP_COMMANDS:
        cli.add_command(command)
