"""Timing spans for operations and pipeline steps, enabled by ``-v``.

A root span opens when a :func:`traced` service operation starts. Each
command invoked underneath gets a child span carrying its exit
``status`` and, when it runs inside a pipeline, its ``position``
(``"2/4"``). The outermost operation attaches the finished tree to
``ServiceResult.meta["telemetry"]``.

Disabled telemetry costs one ContextVar lookup per call.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from dropctl.services.result import ServiceResult

logger = structlog.get_logger(__name__)

_enabled: ContextVar[bool] = ContextVar("dropctl_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("dropctl_active_span", default=None)


@dataclass
class Span:
    """One timed operation or step."""

    name: str
    position: str | None = None
    status: int | None = None
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    ended: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.ended is None:
            return 0.0
        return (self.ended - self.started) * 1000

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.position is not None:
            data["position"] = self.position
        if self.status is not None:
            data["status"] = self.status
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
    _active.set(None)


def active_span() -> Span | None:
    """The innermost open span, or None."""
    return _active.get() if _enabled.get() else None


@contextmanager
def _open(span: Span) -> Iterator[Span]:
    parent = _active.get()
    if parent is not None:
        parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.ended = time.perf_counter()
        _active.reset(token)
        logger.debug(
            "span.closed",
            span=span.name,
            status=span.status,
            duration_ms=round(span.duration_ms, 2),
        )


@contextmanager
def trace_span(name: str, *, position: str | None = None) -> Iterator[Span | None]:
    """Child span for a command.

    Yields None unless telemetry is on and a traced operation is running,
    so steps invoked outside an operation are never timed.
    """
    if active_span() is None:
        yield None
        return
    with _open(Span(name, position=position)) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service operation and record its result status.

    A traced operation called from another (``setup`` running
    ``setup:build``) becomes a child span; only the outermost call
    attaches the tree to the result.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        outermost = _active.get() is None
        with _open(Span(func.__qualname__)) as span:
            result = func(*args, **kwargs)
            if isinstance(result, ServiceResult):
                span.status = result.status
        if outermost and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper
