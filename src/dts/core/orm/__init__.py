"""SQLAlchemy 2.0 ORM layer for the human-effects tables.

Modules
-------
base        DtsBase (declarative base)
session     Engine factory, DtsSession, transaction scope
tables      Mapped tables (HumanDsgTable, DeathsTable, ...)
"""

from __future__ import annotations

from dts.core.orm.base import DtsBase
from dts.core.orm.session import (
    DtsSession,
    create_dts_engine,
    dts_session_factory,
    transaction,
)
from dts.core.orm.tables import *  # noqa: F401,F403

__all__ = [
    "DtsBase",
    "create_dts_engine",
    "DtsSession",
    "dts_session_factory",
    "transaction",
]
