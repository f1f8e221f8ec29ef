"""Sequential, fail-fast command pipelines."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from dropctl.services.invoker import CommandInvoker

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """How far a pipeline got.

    ``status`` is exactly the failing step's exit code, or 0.
    """

    status: int
    completed: tuple[str, ...] = ()
    failed: str | None = None
    skipped: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "completed": list(self.completed),
            "failed": self.failed,
            "skipped": list(self.skipped),
        }


class PipelineRunner:
    """Invoke commands in order, stopping at the first non-zero status.

    Later setup steps assume earlier ones succeeded, so nothing after a
    failure runs. There are no retries.
    """

    def __init__(self, invoker: CommandInvoker) -> None:
        self._invoker = invoker

    def run(self, names: Iterable[str]) -> PipelineResult:
        steps = [str(name) for name in names]
        for index, name in enumerate(steps):
            status = self._invoker.invoke(name, position=f"{index + 1}/{len(steps)}")
            if status != 0:
                logger.warning("pipeline.step_failed", command=name, status=status)
                return PipelineResult(
                    status=status,
                    completed=tuple(steps[:index]),
                    failed=name,
                    skipped=tuple(steps[index + 1 :]),
                )
        return PipelineResult(status=0, completed=tuple(steps))
