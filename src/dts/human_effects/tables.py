"""Effect table kinds and their physical schema descriptors.

The six effect kinds form a closed enum. Each member maps to one
:class:`EffectSchema` holding the physical table, its category-presence
column prefix and its total-group flags column. Nothing else dispatches on
table names at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import Table

from dts.core.errors import UnknownEffectTableError
from dts.core.orm.tables import (
    AffectedTable,
    DeathsTable,
    DisplacedTable,
    DisplacementStocksTable,
    InjuredTable,
    MissingTable,
)


class EffectTable(str, Enum):
    """The six disaster-impact categories."""

    DEATHS = "Deaths"
    INJURED = "Injured"
    MISSING = "Missing"
    AFFECTED = "Affected"
    DISPLACED = "Displaced"
    DISPLACEMENT_STOCKS = "DisplacementStocks"

    @property
    def schema(self) -> EffectSchema:
        return _SCHEMAS[self]

    @property
    def db_name(self) -> str:
        return _SCHEMAS[self].db_name


@dataclass(frozen=True, slots=True)
class EffectSchema:
    """Physical layout of one effect kind.

    Attributes:
        table: SQLAlchemy core table (``id``, ``dsg_id`` plus table columns).
        db_name: Physical table name.
        presence_prefix: Prefix for this kind's category-presence columns,
            ``""`` when the metric db names are used unprefixed.
    """

    table: Table
    db_name: str
    presence_prefix: str

    @property
    def total_group_column(self) -> str:
        return f"{self.db_name}_total_group_flags"


_SCHEMAS: dict[EffectTable, EffectSchema] = {
    EffectTable.DEATHS: EffectSchema(DeathsTable.__table__, "deaths", ""),
    EffectTable.INJURED: EffectSchema(InjuredTable.__table__, "injured", ""),
    EffectTable.MISSING: EffectSchema(MissingTable.__table__, "missing", ""),
    EffectTable.AFFECTED: EffectSchema(AffectedTable.__table__, "affected", "affected"),
    EffectTable.DISPLACED: EffectSchema(DisplacedTable.__table__, "displaced", "displaced"),
    EffectTable.DISPLACEMENT_STOCKS: EffectSchema(
        DisplacementStocksTable.__table__, "displacement_stocks", "displacement_stocks"
    ),
}


def effect_table_from_string(value: Any) -> EffectTable:
    """Parse an effect kind from its enum value (``"Deaths"``) or db name (``"deaths"``).

    Raises:
        UnknownEffectTableError: for anything else.
    """
    if isinstance(value, EffectTable):
        return value
    if isinstance(value, str):
        for member in EffectTable:
            if value == member.value or value == member.db_name:
                return member
    raise UnknownEffectTableError(value)


def resolve_table(table: EffectTable | str) -> EffectTable:
    """Validate a table argument at the top of every repository method."""
    return effect_table_from_string(table)


__all__ = [
    "EffectTable",
    "EffectSchema",
    "effect_table_from_string",
    "resolve_table",
]
