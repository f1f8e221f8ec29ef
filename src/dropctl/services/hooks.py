"""Named extension hooks (e.g. ``post-setup-build``).

A hook has two sources, run in order:

1. a shell command configured under ``[command_hooks.<name>]``;
2. pluggy implementations of ``<name>`` with dashes turned into
   underscores (``post_setup_build``).

The first non-zero status wins. An unconfigured hook succeeds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from dropctl.infrastructure.project import Project

logger = structlog.get_logger(__name__)


def hook_attr(name: str) -> str:
    """Pluggy attribute for a dashed hook name.

    Examples:
        >>> hook_attr("post-setup-build")
        'post_setup_build'
    """
    return name.replace("-", "_")


class HookInvoker:
    """Run configured and plugin-provided implementations of a hook."""

    def __init__(self, project: Project) -> None:
        self._project = project

    def invoke(self, name: str) -> int:
        ran = False

        hook_cfg = self._project.settings.command_hooks.get(name)
        if hook_cfg is not None and hook_cfg.command:
            ran = True
            cwd = self._project.resolve(hook_cfg.dir) if hook_cfg.dir else self._project.root
            logger.info("hook.command", hook=name, command=hook_cfg.command)
            status = self._project.process.run(hook_cfg.command, cwd=cwd)
            if status != 0:
                logger.warning("hook.failed", hook=name, status=status)
                return status

        pm = self._project.plugins
        caller = getattr(pm.hook, hook_attr(name), None) if pm is not None else None
        if caller is not None and caller.get_hookimpls():
            ran = True
            for status in caller(project=self._project):
                if status:
                    logger.warning("hook.failed", hook=name, status=status, source="plugin")
                    return status

        if not ran:
            logger.info("hook.skipped", hook=name, reason="no implementation")
        return 0
