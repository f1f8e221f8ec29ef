"""Fatal error kinds.

Expected step failures travel as status codes, never as exceptions.
These exceptions are reserved for conditions that abort an operation
outright (an OS error inside a step among them); the CLI layer converts
them into failed results.
"""

from __future__ import annotations


class DropctlError(Exception):
    """Base class for fatal dropctl errors."""

    code = "DROPCTL_ERROR"


class UnknownCommandError(DropctlError):
    """A pipeline referenced a command name with no registered handler."""

    code = "UNKNOWN_COMMAND"

    def __init__(self, name: str) -> None:
        super().__init__(f"Command {name!r} is not registered")
        self.name = name


class SitePermissionError(DropctlError):
    """Setting permissions on the multisite directory failed."""

    code = "PERMISSION_FAILED"


class PreconditionError(DropctlError):
    """A required precondition (database, docroot) was not met."""

    code = "PRECONDITION_FAILED"


class StepError(DropctlError):
    """A step hit an OS-level error (unreadable template, unwritable file)."""

    code = "STEP_ERROR"

    def __init__(self, name: str, cause: OSError) -> None:
        super().__init__(f"Step {name!r} failed: {cause}")
        self.name = name
