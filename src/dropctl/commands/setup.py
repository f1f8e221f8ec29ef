"""Commands: the setup pipelines and their individual steps."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dropctl.commands._base import DropCommand
from dropctl.config.models import CONFIG_SPLIT
from dropctl.domain.commands import BUILD_PIPELINE, SETUP_PIPELINE, CommandName

if TYPE_CHECKING:
    from dropctl.commands._context import AppContext

_INSTALL_STEPS = (
    "preconditions (database, docroot)",
    CommandName.INTERNAL_DRUPAL_INSTALL.value,
    f"{CommandName.CONFIG_IMPORT.value} (cm.strategy = {CONFIG_SPLIT})",
    "site directory permissions",
)


@click.command(
    "setup",
    cls=DropCommand,
    steps=SETUP_PIPELINE,
    examples="""\
  dropctl setup
  dropctl setup:all
  dropctl --no-interact setup
  dropctl --json setup""",
)
@click.pass_obj
def setup(app: AppContext) -> None:
    """Install dependencies, build the docroot, and install Drupal."""
    if not (app.settings.quiet or app.settings.json_output):
        site = app.settings.project.site
        click.echo(f"Setting up local environment for site '{site}'...", err=True)
    app.emit(app.run(CommandName.SETUP, lambda: app.setup_service.setup()))


@click.command(
    "setup:build",
    cls=DropCommand,
    steps=BUILD_PIPELINE,
    examples="""\
  dropctl setup:build
  dropctl -v setup:build""",
)
@click.pass_obj
def build(app: AppContext) -> None:
    """Generate all files required for a full build."""
    app.emit(app.run(CommandName.BUILD, lambda: app.setup_service.build()))


@click.command(
    "setup:drupal:install",
    cls=DropCommand,
    steps=_INSTALL_STEPS,
    examples="""\
  dropctl setup:drupal:install
  dropctl --no-interact setup:drupal:install""",
)
@click.pass_obj
def drupal_install(app: AppContext) -> None:
    """Install Drupal and set correct file and directory permissions."""
    svc = app.setup_service
    missing = svc.settings_files_missing()
    if missing and app.project.interactive:
        names = ", ".join(p.name for p in missing)
        if click.confirm(f"Missing {names}. Generate settings files now?", default=True, err=True):
            generated = app.run(CommandName.SETTINGS, lambda: svc.run_step(CommandName.SETTINGS))
            if not generated.ok:
                app.emit(generated)
    app.emit(app.run(CommandName.DRUPAL_INSTALL, svc.drupal_install))


@click.command(
    "step",
    cls=DropCommand,
    examples="""\
  dropctl step --list
  dropctl step setup:hash-salt
  dropctl step my-plugin:step""",
)
@click.argument("name", required=False)
@click.option("--list", "list_only", is_flag=True, help="List registered step names.")
@click.pass_obj
def step(app: AppContext, name: str | None, list_only: bool) -> None:
    """Run any registered step by NAME, including plugin-provided ones."""
    svc = app.setup_service
    if list_only or name is None:
        for registered in svc.registry.names():
            click.echo(registered)
        return
    app.emit(app.run(name, lambda: svc.run_step(name)))


_STEP_HELP: dict[CommandName, str] = {
    CommandName.BEHAT: "Generate the local Behat configuration.",
    CommandName.COMPOSER_INSTALL: "Install Composer dependencies.",
    CommandName.GIT_HOOKS: "Install the project's git hooks.",
    CommandName.SETTINGS: "Generate local settings files from their templates.",
    CommandName.HASH_SALT: "Write a hash salt to salt.txt.",
    CommandName.CONFIG_IMPORT: "Import configuration with drush.",
    CommandName.INSTALL_ALIAS: "Add a shell alias for dropctl to the rc file.",
    CommandName.SIMPLESAMLPHP_CONFIG: "Copy SimpleSAMLphp config into the vendor library.",
    CommandName.INTERNAL_DRUPAL_INSTALL: "Run drush site-install (no preconditions).",
}


def _make_step_command(name: CommandName, help_text: str) -> click.Command:
    @click.command(name.value, cls=DropCommand, help=help_text, examples=f"  dropctl {name.value}")
    @click.pass_obj
    def _step(app: AppContext) -> None:
        app.emit(app.run(name, lambda: app.setup_service.run_step(name)))

    return _step


STEP_COMMANDS: list[click.Command] = [
    _make_step_command(name, help_text) for name, help_text in _STEP_HELP.items()
]
