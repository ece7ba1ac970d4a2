"""Base repository over a caller-supplied SQLAlchemy session.

Provides :class:`SessionRepository`, the base class for the human-effects
repositories. It wraps a ``Session`` that the caller owns: the repository
executes statements but never begins, commits or rolls back.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                      SessionRepository                             │
    │                                                                    │
    │   session: Session        ← transaction handle owned by caller     │
    │                                                                    │
    │   execute(stmt)            → Result                                │
    │   scalar(stmt)             → Any | None                            │
    │   scalars(stmt)            → list[Any]                             │
    │   insert(table, data)      → None                                  │
    └────────────────────────────────────────────────────────────────────┘

Usage:
    >>> class RecordRepo(SessionRepository):
    ...     def ids(self):
    ...         return self.scalars(select(DisasterRecordTable.id))

Tags:
    repository, database, sqlalchemy, session
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Table, insert
from sqlalchemy.engine import Result as SAResult
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable


class SessionRepository:
    """Session-backed base class for data-access repositories.

    Parameters:
        session: A ``sqlalchemy.orm.Session``. Its transaction scope is
                 controlled by the caller.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # -- Query helpers -----------------------------------------------------

    def execute(self, stmt: Executable, params: Any = None) -> SAResult:
        """Execute a statement and return the raw result."""
        if params is None:
            return self.session.execute(stmt)
        return self.session.execute(stmt, params)

    def scalar(self, stmt: Executable) -> Any:
        """Execute and return the first column of the first row (or None)."""
        return self.session.execute(stmt).scalar()

    def scalars(self, stmt: Executable) -> list[Any]:
        """Execute and return the first column of every row."""
        return list(self.session.execute(stmt).scalars())

    # -- Insert helpers ----------------------------------------------------

    def insert(self, table: Table, data: dict[str, Any]) -> None:
        """Insert a single row from a dict of column name to value."""
        self.session.execute(insert(table).values(data))


__all__ = [
    "SessionRepository",
]
