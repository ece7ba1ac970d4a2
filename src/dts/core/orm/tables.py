"""Human-effects table definitions.

Every disaggregated measurement row is stored as two physical rows joined
1:1: a ``human_dsg`` aggregate row (shared dimensions plus the ``custom``
JSON map) and a row in one of the six effect tables holding the
table-specific dimensions and metrics plus ``dsg_id`` back to the aggregate.

``disaster_records`` is owned by the record-management side of the
application. Only the columns this layer joins on are declared here.

Tags:
    dts, orm, sqlalchemy, tables, human-effects

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

import datetime
import uuid

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from dts.core.orm.base import DtsBase


def new_id() -> str:
    return str(uuid.uuid4())


class DisasterRecordTable(DtsBase):
    __tablename__ = "disaster_records"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    country_accounts_id: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.current_timestamp()
    )


class HumanDsgTable(DtsBase):
    __tablename__ = "human_dsg"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    record_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("disaster_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    custom: Mapped[dict | None] = mapped_column(JSON)
    sex: Mapped[str | None] = mapped_column(Text)
    age: Mapped[str | None] = mapped_column(Text)
    disability: Mapped[str | None] = mapped_column(Text)
    global_poverty_line: Mapped[str | None] = mapped_column(Text)
    national_poverty_line: Mapped[str | None] = mapped_column(Text)


# --- effect tables -----------------------------------------------------------


class DeathsTable(DtsBase):
    __tablename__ = "deaths"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    dsg_id: Mapped[str] = mapped_column(
        Text, ForeignKey("human_dsg.id", ondelete="CASCADE"), nullable=False, index=True
    )
    deaths: Mapped[int | None] = mapped_column(Integer)


class InjuredTable(DtsBase):
    __tablename__ = "injured"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    dsg_id: Mapped[str] = mapped_column(
        Text, ForeignKey("human_dsg.id", ondelete="CASCADE"), nullable=False, index=True
    )
    injured: Mapped[int | None] = mapped_column(Integer)


class MissingTable(DtsBase):
    __tablename__ = "missing"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    dsg_id: Mapped[str] = mapped_column(
        Text, ForeignKey("human_dsg.id", ondelete="CASCADE"), nullable=False, index=True
    )
    as_of: Mapped[datetime.date | None] = mapped_column(Date)
    missing: Mapped[int | None] = mapped_column(Integer)


class AffectedTable(DtsBase):
    __tablename__ = "affected"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    dsg_id: Mapped[str] = mapped_column(
        Text, ForeignKey("human_dsg.id", ondelete="CASCADE"), nullable=False, index=True
    )
    direct: Mapped[int | None] = mapped_column(Integer)
    indirect: Mapped[int | None] = mapped_column(Integer)


class DisplacedTable(DtsBase):
    __tablename__ = "displaced"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    dsg_id: Mapped[str] = mapped_column(
        Text, ForeignKey("human_dsg.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assisted: Mapped[str | None] = mapped_column(Text)
    timing: Mapped[str | None] = mapped_column(Text)
    as_of: Mapped[datetime.date | None] = mapped_column(Date)
    short: Mapped[int | None] = mapped_column(Integer)
    medium_short: Mapped[int | None] = mapped_column(Integer)
    medium_long: Mapped[int | None] = mapped_column(Integer)
    long: Mapped[int | None] = mapped_column(Integer)
    permanent: Mapped[int | None] = mapped_column(Integer)


class DisplacementStocksTable(DtsBase):
    __tablename__ = "displacement_stocks"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    dsg_id: Mapped[str] = mapped_column(
        Text, ForeignKey("human_dsg.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assisted: Mapped[str | None] = mapped_column(Text)
    as_of: Mapped[datetime.date | None] = mapped_column(Date)
    displacement_stocks: Mapped[int | None] = mapped_column(Integer)


# --- per-record presence / configuration ------------------------------------


class HumanCategoryPresenceTable(DtsBase):
    """One row per disaster record.

    Boolean columns record whether a metric is tracked for the record.
    ``NULL`` means the user never answered. The ``*_total_group_flags`` JSON
    columns hold the per-table list of ``{dbName, isSet}`` entries.
    """

    __tablename__ = "human_category_presence"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=new_id)
    record_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("disaster_records.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    deaths: Mapped[bool | None] = mapped_column(Boolean)
    injured: Mapped[bool | None] = mapped_column(Boolean)
    missing: Mapped[bool | None] = mapped_column(Boolean)
    affected_direct: Mapped[bool | None] = mapped_column(Boolean)
    affected_indirect: Mapped[bool | None] = mapped_column(Boolean)
    displaced_short: Mapped[bool | None] = mapped_column(Boolean)
    displaced_medium_short: Mapped[bool | None] = mapped_column(Boolean)
    displaced_medium_long: Mapped[bool | None] = mapped_column(Boolean)
    displaced_long: Mapped[bool | None] = mapped_column(Boolean)
    displaced_permanent: Mapped[bool | None] = mapped_column(Boolean)
    displacement_stocks: Mapped[bool | None] = mapped_column(Boolean)

    deaths_total_group_flags: Mapped[list | None] = mapped_column(JSON)
    injured_total_group_flags: Mapped[list | None] = mapped_column(JSON)
    missing_total_group_flags: Mapped[list | None] = mapped_column(JSON)
    affected_total_group_flags: Mapped[list | None] = mapped_column(JSON)
    displaced_total_group_flags: Mapped[list | None] = mapped_column(JSON)
    displacement_stocks_total_group_flags: Mapped[list | None] = mapped_column(JSON)


class HumanDsgConfigTable(DtsBase):
    """Single-row tenant configuration for disaggregations.

    ``hidden`` is ``{"cols": [...]}``; ``custom`` is ``{"config": [...]}``.
    """

    __tablename__ = "human_dsg_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hidden: Mapped[dict | None] = mapped_column(JSON)
    custom: Mapped[dict | None] = mapped_column(JSON)


__all__ = [
    "new_id",
    "DisasterRecordTable",
    "HumanDsgTable",
    "DeathsTable",
    "InjuredTable",
    "MissingTable",
    "AffectedTable",
    "DisplacedTable",
    "DisplacementStocksTable",
    "HumanCategoryPresenceTable",
    "HumanDsgConfigTable",
]
