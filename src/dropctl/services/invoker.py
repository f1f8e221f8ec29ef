"""Command registry and invoker.

Commands are resolved by name through an explicit registry. Built-in
steps are registered at startup; plugins may add or replace handlers.
An unregistered name fails fast with :class:`UnknownCommandError`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import structlog

from dropctl.domain.errors import StepError, UnknownCommandError
from dropctl.services.telemetry import trace_span

if TYPE_CHECKING:
    from dropctl.infrastructure.project import Project

# A handler receives the project and returns an exit status.
# ``None`` is treated as success.
StepHandler = Callable[["Project"], "int | None"]

logger = structlog.get_logger(__name__)


class CommandRegistry:
    """Maps command names to step handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, StepHandler] = {}

    def register(self, name: str, handler: StepHandler, *, replace: bool = False) -> None:
        """Register *handler* under *name*.

        Raises:
            ValueError: *name* is empty, or already registered and
                *replace* is False.
        """
        key = str(name)
        if not key:
            msg = "Command name must not be empty"
            raise ValueError(msg)
        if key in self._handlers and not replace:
            msg = f"Command {key!r} is already registered"
            raise ValueError(msg)
        self._handlers[key] = handler

    def resolve(self, name: str) -> StepHandler:
        try:
            return self._handlers[str(name)]
        except KeyError:
            raise UnknownCommandError(str(name)) from None

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return str(name) in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._handlers)


class CommandInvoker:
    """Resolve a command by name and run it synchronously."""

    def __init__(self, registry: CommandRegistry, project: Project) -> None:
        self._registry = registry
        self._project = project

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    def invoke(self, name: str, *, position: str | None = None) -> int:
        """Run the handler registered for *name* and return its status unchanged.

        *position* (``"2/4"``) is recorded on the step's telemetry span.

        Raises:
            UnknownCommandError: *name* is not registered.
            StepError: The handler raised an ``OSError``.
        """
        handler = self._registry.resolve(name)
        step = str(name)
        with (
            structlog.contextvars.bound_contextvars(step=step),
            trace_span(step, position=position) as span,
        ):
            logger.info("command.invoke", position=position)
            try:
                status = handler(self._project)
            except OSError as exc:
                logger.error("command.os_error", error=str(exc))
                raise StepError(step, exc) from exc
            if status is None:
                status = 0
            if span is not None:
                span.status = status
        return status
