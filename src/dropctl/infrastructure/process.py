"""Blocking subprocess execution for external tools (composer, drush).

Every call runs to completion before returning its exit status. There
is no timeout: a hung tool hangs the pipeline.
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

# Shell convention for "command not found".
COMMAND_NOT_FOUND = 127

logger = structlog.get_logger(__name__)


def detect_interactive(*, no_interact: bool = False) -> bool:
    """True when stdin is a terminal and prompts were not disabled."""
    if no_interact:
        return False
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


class ProcessRunner:
    """Run external commands and return their exit status.

    When *interactive* is True the child inherits stdin so tools can
    prompt; otherwise stdin is ``/dev/null``. *quiet* discards stdout.
    """

    def __init__(self, *, interactive: bool = False, quiet: bool = False) -> None:
        self.interactive = interactive
        self.quiet = quiet

    def run(
        self,
        args: Sequence[str] | str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """Run *args* (a string is run through the shell) and return the exit code."""
        shell = isinstance(args, str)
        merged_env = {**os.environ, **(env or {})}
        logger.info("process.run", command=args if shell else list(args), cwd=str(cwd))
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                env=merged_env,
                shell=shell,
                stdin=None if self.interactive else subprocess.DEVNULL,
                stdout=subprocess.DEVNULL if self.quiet else None,
                check=False,
            )
        except FileNotFoundError as exc:
            logger.error("process.not_found", command=exc.filename or str(args))
            return COMMAND_NOT_FOUND
        if completed.returncode != 0:
            logger.warning("process.failed", returncode=completed.returncode)
        return completed.returncode
