"""structlog setup for dropctl.

Log lines go to stderr so they never mix with command output on stdout.
While a step runs, :class:`~dropctl.services.invoker.CommandInvoker`
binds its name as ``step``, so every line a step emits (including the
subprocess runner's) says which step it came from.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "dropctl"


def log_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Level for the ``dropctl`` logger.

    ``-v`` shows debug output and ``-q`` keeps errors only. ``-v`` wins
    when both are given.

    Examples:
        >>> log_level(quiet=True) == logging.ERROR
        True
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging through one stderr handler."""
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(LOGGER_NAME).setLevel(log_level(verbose=verbose, quiet=quiet))
    # Engine chatter from the database check.
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
