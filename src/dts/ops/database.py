"""
Database operations.

Thin wrapper around the ORM metadata for table creation.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

import dts.core.orm.tables  # noqa: F401  registers the mapped tables
from dts.core.logging import get_logger
from dts.core.orm.base import DtsBase
from dts.core.orm.session import transaction
from dts.ops.context import OperationContext
from dts.ops.responses import DatabaseInitResult
from dts.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def initialize_database(ctx: OperationContext) -> OperationResult[DatabaseInitResult]:
    """Create all human-effects tables (idempotent)."""
    timer = start_timer()
    try:
        with transaction(ctx.session):
            DtsBase.metadata.create_all(bind=ctx.session.connection())
    except SQLAlchemyError as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to create tables: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )

    table_names = sorted(DtsBase.metadata.tables)
    logger.info("db_initialized", tables=table_names)
    return OperationResult.ok(
        DatabaseInitResult(tables_created=table_names),
        elapsed_ms=timer.elapsed_ms,
    )
