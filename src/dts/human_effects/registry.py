"""Compose the full definition list for an effect table.

The column order is always ``shared ++ custom ++ table_specific``. Shared
columns the tenant hid and custom dimensions come from
:class:`~dts.human_effects.config.DsgConfigRepository`.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from dts.human_effects.config import DsgConfigRepository
from dts.human_effects.definitions import (
    FieldDefinition,
    custom_definitions,
    shared_definitions,
    table_definitions,
)
from dts.human_effects.tables import EffectTable, resolve_table


class DefinitionRegistry:
    """Builds per-table definitions from the static catalogs and tenant config."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.config = DsgConfigRepository(session)

    def shared(self) -> list[FieldDefinition]:
        return shared_definitions(self.config.get_hidden())

    def custom(self) -> list[FieldDefinition]:
        return custom_definitions(self.config.get_custom())

    def definitions_for_table(self, table: EffectTable | str) -> list[FieldDefinition]:
        table = resolve_table(table)
        return self.shared() + self.custom() + table_definitions(table)


__all__ = ["DefinitionRegistry"]
