"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy project/service initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from dropctl.domain.errors import DropctlError
from dropctl.output.formatters import OutputSettings, format_result
from dropctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from dropctl.config.settings import DropSettings
    from dropctl.infrastructure.project import Project
    from dropctl.services.setup import SetupService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The project (and its plugins) is initialized on first use so
    ``--help`` and ``--version`` never load plugins.
    """

    def __init__(self, settings: DropSettings) -> None:
        self.settings = settings
        self._project: Project | None = None
        self._setup_service: SetupService | None = None

        from dropctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from dropctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def project(self) -> Project:
        """The project (created lazily on first access, plugins loaded)."""
        if self._project is None:
            from dropctl.infrastructure.project import Project

            self._project = Project(self.settings)
            self._project.init_plugins()
        return self._project

    @property
    def setup_service(self) -> SetupService:
        if self._setup_service is None:
            from dropctl.services.setup import SetupService

            self._setup_service = SetupService(self.project)
        return self._setup_service

    def run(self, op: str, action: Callable[[], ServiceResult]) -> ServiceResult:
        """Call *action*, turning fatal dropctl errors into a failed result."""
        try:
            return action()
        except DropctlError as exc:
            return ServiceResult(
                ok=False,
                op=str(op),
                status=1,
                error=ServiceError(code=exc.code, message=str(exc)),
            )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr and exits with ``result.status``
          (1 when the status is 0).
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(result.status or 1)
