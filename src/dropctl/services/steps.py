"""Built-in step handlers.

Each handler takes the :class:`Project` and returns an exit status.
Heavy lifting (dependency resolution, site installation, config
import) is delegated to ``composer`` and ``drush``; the remaining steps
are copy-if-missing file operations on the project checkout.
"""

from __future__ import annotations

import secrets
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from dropctl.domain.commands import CommandName

if TYPE_CHECKING:
    from dropctl.infrastructure.project import Project
    from dropctl.services.invoker import StepHandler

logger = structlog.get_logger(__name__)

SALT_FILENAME = "salt.txt"
# 41 random bytes -> 55 url-safe characters.
SALT_BYTES = 41

# (template, target, required) relative to the multisite directory.
SETTINGS_TEMPLATES: tuple[tuple[str, str, bool], ...] = (
    ("settings/default.local.settings.php", "settings/local.settings.php", True),
    ("default.local.drush.yml", "local.drush.yml", False),
)

# drush commands run, in order, to import split configuration.
CONFIG_IMPORT_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("updatedb", "--yes"),
    ("config-import", "--yes"),
    ("cache-rebuild",),
)


def _copy_if_missing(template: Path, target: Path) -> bool:
    """Copy *template* to *target* unless it exists. Returns True if copied."""
    if target.exists():
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(template, target)
    return True


def _drush(project: Project, *args: str) -> int:
    settings = project.settings
    return project.process.run(
        [settings.drush.bin, f"--root={project.docroot}", f"--uri={settings.project.site}", *args],
        cwd=project.docroot,
    )


# ---------------------------------------------------------------------------
# Build steps
# ---------------------------------------------------------------------------


def setup_behat(project: Project) -> int:
    """Create ``local.yml`` for Behat from the example file."""
    behat_dir = project.resolve(project.settings.behat.dir)
    if not behat_dir.is_dir():
        logger.info("behat.skipped", reason="not configured", dir=str(behat_dir))
        return 0
    example = behat_dir / "example.local.yml"
    target = behat_dir / "local.yml"
    if target.exists():
        return 0
    if not example.is_file():
        logger.error("behat.template_missing", path=str(example))
        return 1
    _copy_if_missing(example, target)
    logger.info("behat.configured", path=str(target))
    return 0


def composer_install(project: Project) -> int:
    """Install Composer dependencies; any failed patch fails the install."""
    return project.process.run(
        [project.settings.composer.bin, "install", "--ansi", "--no-interaction"],
        cwd=project.root,
        env={"COMPOSER_EXIT_ON_PATCH_FAILURE": "1"},
    )


def setup_git_hooks(project: Project) -> int:
    """Symlink the project's git hooks into ``.git/hooks``."""
    git_dir = project.root / ".git"
    if not git_dir.is_dir():
        logger.info("git_hooks.skipped", reason="not a git repository")
        return 0
    source_dir = project.resolve(project.settings.git.hooks_dir)
    hooks_dir = git_dir / "hooks"
    try:
        hooks_dir.mkdir(exist_ok=True)
        for hook in project.settings.git.hooks:
            source = source_dir / hook
            if not source.is_file():
                logger.warning("git_hooks.source_missing", hook=hook, path=str(source))
                continue
            dest = hooks_dir / hook
            if dest.is_symlink() or dest.exists():
                dest.unlink()
            dest.symlink_to(source)
            logger.debug("git_hooks.installed", hook=hook)
    except OSError as exc:
        logger.error("git_hooks.failed", error=str(exc))
        return 1
    return 0


def settings_targets(project: Project, *, required_only: bool = False) -> list[Path]:
    """Local settings files generated by ``setup:settings``."""
    site_dir = project.multisite_dir
    return [
        site_dir / target
        for _template, target, required in SETTINGS_TEMPLATES
        if required or not required_only
    ]


def setup_settings(project: Project) -> int:
    """Generate local settings files from their ``default.*`` templates."""
    site_dir = project.multisite_dir
    for template_rel, target_rel, required in SETTINGS_TEMPLATES:
        template = site_dir / template_rel
        target = site_dir / target_rel
        if target.exists():
            continue
        if not template.is_file():
            if required:
                logger.error("settings.template_missing", path=str(template))
                return 1
            continue
        _copy_if_missing(template, target)
        logger.info("settings.generated", path=str(target))
    return 0


def build_saml_config(project: Project) -> int:
    """Copy SimpleSAMLphp config and metadata into the vendor library."""
    saml = project.settings.saml
    source = project.resolve(saml.config_dir)
    dest = project.resolve(saml.vendor_dir)
    if not source.is_dir():
        logger.error("saml.config_missing", path=str(source))
        return 1
    for sub in ("config", "metadata"):
        if (source / sub).is_dir():
            shutil.copytree(source / sub, dest / sub, dirs_exist_ok=True)
    logger.info("saml.config_built", dest=str(dest))
    return 0


# ---------------------------------------------------------------------------
# Install steps
# ---------------------------------------------------------------------------


def hash_salt(project: Project) -> int:
    """Write a random hash salt to ``salt.txt`` unless one already exists."""
    salt_file = project.root / SALT_FILENAME
    if salt_file.exists():
        logger.debug("hash_salt.exists", path=str(salt_file))
        return 0
    salt_file.write_text(secrets.token_urlsafe(SALT_BYTES), encoding="utf-8")
    logger.info("hash_salt.written", path=str(salt_file))
    return 0


def drupal_site_install(project: Project) -> int:
    """Run ``drush site-install`` with the configured profile and account."""
    cfg = project.settings.project
    return _drush(
        project,
        "site-install",
        cfg.profile,
        f"--sites-subdir={cfg.site}",
        f"--site-name={cfg.site_name}",
        f"--site-mail={cfg.site_mail}",
        f"--account-name={cfg.account_name}",
        f"--account-mail={cfg.account_mail}",
        f"--locale={cfg.locale}",
        "--yes",
    )


def config_import(project: Project) -> int:
    """Apply pending updates and import configuration."""
    for args in CONFIG_IMPORT_COMMANDS:
        status = _drush(project, *args)
        if status != 0:
            return status
    return 0


def install_alias(project: Project) -> int:
    """Add a shell alias for the CLI to the user's rc file."""
    alias = project.settings.alias
    rc_file = project.resolve(alias.rc_file)
    if not rc_file.is_file():
        logger.warning("alias.rc_missing", path=str(rc_file))
        return 0
    prefix = f"alias {alias.name}="
    contents = rc_file.read_text(encoding="utf-8")
    if any(line.startswith(prefix) for line in contents.splitlines()):
        logger.debug("alias.exists", path=str(rc_file))
        return 0
    line = f"{prefix}'{sys.executable} -m dropctl'\n"
    with rc_file.open("a", encoding="utf-8") as fh:
        if contents and not contents.endswith("\n"):
            fh.write("\n")
        fh.write(line)
    logger.info("alias.installed", path=str(rc_file), name=alias.name)
    return 0


def builtin_handlers() -> dict[str, StepHandler]:
    """Atomic steps shipped with dropctl, keyed by command name."""
    return {
        CommandName.BEHAT: setup_behat,
        CommandName.COMPOSER_INSTALL: composer_install,
        CommandName.GIT_HOOKS: setup_git_hooks,
        CommandName.SETTINGS: setup_settings,
        CommandName.SIMPLESAMLPHP_CONFIG: build_saml_config,
        CommandName.HASH_SALT: hash_salt,
        CommandName.INTERNAL_DRUPAL_INSTALL: drupal_site_install,
        CommandName.CONFIG_IMPORT: config_import,
        CommandName.INSTALL_ALIAS: install_alias,
    }
