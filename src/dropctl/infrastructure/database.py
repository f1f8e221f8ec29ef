"""Database reachability check used as an install precondition."""

from __future__ import annotations

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from dropctl.domain.errors import PreconditionError

logger = structlog.get_logger(__name__)


def check_database(url: str) -> None:
    """Open a connection to *url* and run ``SELECT 1``.

    Raises:
        PreconditionError: The driver is missing or the server is unreachable.
    """
    try:
        engine = create_engine(url)
    except (SQLAlchemyError, ImportError) as exc:
        msg = f"Database URL is not usable: {exc}"
        raise PreconditionError(msg) from exc
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        safe_url = engine.url.render_as_string(hide_password=True)
        msg = f"Database {safe_url} is not available: {exc}"
        raise PreconditionError(msg) from exc
    finally:
        engine.dispose()
    logger.debug("database.available", dialect=engine.dialect.name)
