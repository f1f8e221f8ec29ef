"""SetupService — the ``setup``, ``setup:build`` and ``setup:drupal:install`` operations.

Each operation is a fixed pipeline plus a little control logic:

- ``setup``: build, hash salt, install, shell alias.
- ``setup:build``: Behat, Composer, git hooks, settings; then the
  optional SSO config step and the ``post-setup-build`` hook.
- ``setup:drupal:install``: preconditions, site install (plus config
  import under the ``config-split`` strategy), then site permissions.

Step failures come back as non-zero ``status`` values. Fatal conditions
(unknown command, unmet precondition, permission failure) raise
:class:`~dropctl.domain.errors.DropctlError` subclasses.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from dropctl.domain.commands import (
    BUILD_PIPELINE,
    POST_SETUP_BUILD_HOOK,
    SETUP_PIPELINE,
    CommandName,
    install_pipeline,
)
from dropctl.domain.errors import PreconditionError
from dropctl.infrastructure.database import check_database
from dropctl.infrastructure.permissions import DEFAULT_EXCLUDE, PermissionNormalizer
from dropctl.services.hooks import HookInvoker
from dropctl.services.invoker import CommandInvoker, CommandRegistry
from dropctl.services.pipeline import PipelineResult, PipelineRunner
from dropctl.services.result import ServiceError, ServiceResult
from dropctl.services.steps import builtin_handlers, settings_targets
from dropctl.services.telemetry import traced

if TYPE_CHECKING:
    from dropctl.infrastructure.project import Project

logger = structlog.get_logger(__name__)


def default_registry(project: Project) -> CommandRegistry:
    """Built-in step handlers, overridden by any plugin-provided ones."""
    registry = CommandRegistry()
    for name, handler in builtin_handlers().items():
        registry.register(name, handler)
    if project.plugins is not None:
        for name, handler in project.plugins.collect_step_handlers().items():
            registry.register(name, handler, replace=True)
    return registry


def _step_failed(op: str, pipeline: PipelineResult, **data: Any) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        status=pipeline.status,
        data={"steps": pipeline.to_dict(), **data},
        error=ServiceError(
            code="STEP_FAILED",
            message=f"Step '{pipeline.failed}' failed with status {pipeline.status}",
            detail=pipeline.to_dict(),
        ),
    )


class SetupService:
    """Orchestrates the setup pipelines for a project."""

    def __init__(
        self,
        project: Project,
        *,
        registry: CommandRegistry | None = None,
        normalizer: PermissionNormalizer | None = None,
        hooks: HookInvoker | None = None,
        check_db: Callable[[str], None] = check_database,
    ) -> None:
        self._project = project
        self._registry = registry if registry is not None else default_registry(project)
        self._normalizer = normalizer or PermissionNormalizer(verbose=project.settings.verbose)
        self._hooks = hooks or HookInvoker(project)
        self._check_db = check_db
        self._invoker = CommandInvoker(self._registry, project)
        self._runner = PipelineRunner(self._invoker)

        composites = {
            CommandName.SETUP: lambda _project: self.setup().status,
            CommandName.BUILD: lambda _project: self.build().status,
            CommandName.DRUPAL_INSTALL: lambda _project: self.drupal_install().status,
        }
        for name, handler in composites.items():
            if name not in self._registry:
                self._registry.register(name, handler)

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @traced
    def setup(self) -> ServiceResult:
        """Install dependencies, build the docroot, and install Drupal."""
        op = CommandName.SETUP.value
        site = self._project.settings.project.site
        logger.info("setup.start", message=f"Setting up local environment for site '{site}'...")
        pipeline = self._runner.run(SETUP_PIPELINE)
        if not pipeline.ok:
            return _step_failed(op, pipeline, site=site)
        return ServiceResult(ok=True, op=op, data={"site": site, "steps": pipeline.to_dict()})

    @traced
    def build(self) -> ServiceResult:
        """Generate all files required for a full build.

        The ``post-setup-build`` hook's status is the result: a failing
        hook fails an otherwise successful build.
        """
        op = CommandName.BUILD.value
        pipeline = self._runner.run(BUILD_PIPELINE)
        if not pipeline.ok:
            return _step_failed(op, pipeline)

        data: dict[str, Any] = {"steps": pipeline.to_dict()}
        warnings: list[str] = []

        if self._project.settings.simplesamlphp:
            saml_status = self._invoker.invoke(CommandName.SIMPLESAMLPHP_CONFIG)
            data["simplesamlphp_status"] = saml_status
            if saml_status != 0:
                warnings.append(
                    f"{CommandName.SIMPLESAMLPHP_CONFIG} exited with status {saml_status}"
                )

        hook_status = self._hooks.invoke(POST_SETUP_BUILD_HOOK)
        data["hook_status"] = hook_status
        if hook_status != 0:
            warnings.append(
                f"All build steps succeeded; '{POST_SETUP_BUILD_HOOK}' hook status overrides result"
            )
            return ServiceResult(
                ok=False,
                op=op,
                status=hook_status,
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code="HOOK_FAILED",
                    message=f"Hook '{POST_SETUP_BUILD_HOOK}' failed with status {hook_status}",
                ),
            )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def drupal_install(self) -> ServiceResult:
        """Install Drupal and set site directory permissions.

        Raises:
            PreconditionError: Database unreachable or docroot missing.
            SitePermissionError: Permissions could not be applied.
        """
        op = CommandName.DRUPAL_INSTALL.value
        self.validate_preconditions()

        pipeline = self._runner.run(install_pipeline(self._project.settings.cm.strategy))
        if not pipeline.ok:
            return _step_failed(op, pipeline)

        report = self._normalizer.normalize(self._project.multisite_dir, DEFAULT_EXCLUDE)
        return ServiceResult(
            ok=True,
            op=op,
            data={"steps": pipeline.to_dict(), "permissions": report.to_dict()},
        )

    @traced
    def run_step(self, name: str) -> ServiceResult:
        """Invoke a single registered command."""
        op = str(name)
        status = self._invoker.invoke(name)
        if status != 0:
            return ServiceResult(
                ok=False,
                op=op,
                status=status,
                error=ServiceError(
                    code="STEP_FAILED",
                    message=f"Step '{op}' failed with status {status}",
                ),
            )
        return ServiceResult(ok=True, op=op, data={"status": 0})

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def validate_preconditions(self) -> None:
        """Database reachable and docroot present, checked in that order."""
        self._check_db(self._project.settings.db.url)
        docroot = self._project.docroot
        if not docroot.is_dir():
            msg = f"Docroot not found: {docroot}"
            raise PreconditionError(msg)

    def settings_files_missing(self) -> list[Path]:
        """Required local settings files that do not exist yet."""
        return [p for p in settings_targets(self._project, required_only=True) if not p.exists()]
