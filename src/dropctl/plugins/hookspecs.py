"""Pluggy hook specifications for dropctl extension points."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from dropctl.infrastructure.project import Project
    from dropctl.services.invoker import StepHandler

PROJECT_NAME = "dropctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class DropctlHookSpec:
    """Hook specifications for the dropctl plugin system."""

    @hookspec
    def post_setup_build(self, project: Project) -> int | None:
        """Called after ``setup:build`` completes its pipeline.

        Return a non-zero exit status to fail the build. The first
        non-zero status across implementations becomes the build result.
        """

    @hookspec
    def register_step_handlers(self) -> dict[str, StepHandler] | None:
        """Return command name -> handler mappings to add to the registry.

        A handler registered under a built-in name replaces it.
        """
