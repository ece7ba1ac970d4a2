"""SQLAlchemy engine factory, session class and transaction scope.

The human-effects repositories never begin or commit transactions. They
receive a ``Session`` from the caller and only execute/flush. This module
provides the pieces callers use to build that session and demarcate the
transaction around a whole create/update/delete sequence.

* ``create_dts_engine``   -- Create a SA engine from a URL.
* ``DtsSession``          -- Session with ``expire_on_commit=False``.
* ``dts_session_factory`` -- ``sessionmaker`` producing ``DtsSession``.
* ``transaction``         -- Begin (or nest) a transaction on a session.

Tags:
    dts, orm, sqlalchemy, session, engine, transaction

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def create_dts_engine(
    url: str = "sqlite:///dts.db",
    *,
    echo: bool = False,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL (``sqlite:///…``, ``postgresql+psycopg://…``, etc.)
    echo:
        If ``True``, log all SQL to stdout.
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = _sa_create_engine(url, echo=echo, **kwargs)

        # Foreign keys are off by default in SQLite
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
            # let SQLAlchemy emit BEGIN itself so SAVEPOINT works
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _do_begin(conn: Any) -> None:
            conn.exec_driver_sql("BEGIN")

        return engine

    return _sa_create_engine(url, echo=echo, **kwargs)


class DtsSession(Session):
    """Pre-configured session with ``expire_on_commit=False``.

    Prevents lazy-load surprises after commit.
    """

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def dts_session_factory(engine: Engine) -> sessionmaker[DtsSession]:
    """Return a ``sessionmaker`` bound to *engine* that produces ``DtsSession`` instances."""
    return sessionmaker(bind=engine, class_=DtsSession)


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Run the block inside a transaction, rolling back on any exception.

    If *session* already has a transaction in progress a SAVEPOINT is used,
    so the block can be rolled back without discarding the outer work.
    """
    if session.in_transaction():
        with session.begin_nested():
            yield session
    else:
        with session.begin():
            yield session
