"""
Per-record category presence and total-group flags.

``human_category_presence`` keeps one row per disaster record. Its boolean
columns say whether a metric is tracked for the record (``NULL`` means the
user never answered). Its ``<table>_total_group_flags`` JSON columns hold,
per effect table, which dimensions are aggregated into a total row.

Presence column names follow the table's prefix:

==================  ================  ==============================
table               metric db name    presence column
==================  ================  ==============================
Deaths              deaths            deaths
Affected            direct            affected_direct
Displaced           medium_short      displaced_medium_short
DisplacementStocks  displacement_...  displacement_stocks
==================  ================  ==============================

Examples:
    >>> repo = CategoryPresenceRepository(session)
    >>> repo.set("r-1", EffectTable.INJURED, defs, {"injured": True})
    >>> repo.get("r-1", EffectTable.INJURED, defs)
    {'injured': True}

Tags:
    dts, human-effects, presence, repository

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select, update

from dts.core.errors import UnsupportedFieldError
from dts.core.logging import get_logger
from dts.core.orm.tables import DisasterRecordTable, HumanCategoryPresenceTable, new_id
from dts.core.repository import SessionRepository
from dts.human_effects.definitions import FieldDefinition
from dts.human_effects.tables import EffectSchema, EffectTable, resolve_table

logger = get_logger(__name__)

_PRESENCE = HumanCategoryPresenceTable.__table__
_RECORDS = DisasterRecordTable.__table__


@dataclass(frozen=True, slots=True)
class TotalGroupFlag:
    """Whether one dimension column is part of the table's total group."""

    db_name: str
    is_set: bool

    def to_json(self) -> dict[str, Any]:
        return {"dbName": self.db_name, "isSet": self.is_set}

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> TotalGroupFlag:
        db_name = data["dbName"]
        is_set = data["isSet"]
        if not isinstance(db_name, str) or not isinstance(is_set, bool):
            raise ValueError(f"invalid total group flag: {dict(data)!r}")
        return cls(db_name, is_set)

    @classmethod
    def coerce(cls, value: TotalGroupFlag | Mapping[str, Any]) -> TotalGroupFlag:
        if isinstance(value, TotalGroupFlag):
            return value
        return cls.from_json(value)


def presence_column(schema: EffectSchema, d: FieldDefinition) -> str:
    """Presence column for metric ``d`` of the table described by ``schema``."""
    prefix = schema.presence_prefix
    if not prefix or d.db_name == prefix:
        return d.db_name
    return f"{prefix}_{d.db_name}"


class CategoryPresenceRepository(SessionRepository):
    """Read and write ``human_category_presence`` rows."""

    def _metric_columns(
        self, table: EffectTable, defs: Sequence[FieldDefinition]
    ) -> list[tuple[FieldDefinition, str]]:
        schema = table.schema
        out: list[tuple[FieldDefinition, str]] = []
        for d in defs:
            if not d.is_metric:
                continue
            if d.custom:
                raise UnsupportedFieldError("Custom metrics not supported")
            col = presence_column(schema, d)
            if col not in _PRESENCE.c:
                raise UnsupportedFieldError(
                    f"No presence column {col!r} for metric {d.db_name!r} of {table.value}"
                )
            out.append((d, col))
        return out

    def _row_id(self, record_id: str) -> str | None:
        return self.scalar(select(_PRESENCE.c.id).where(_PRESENCE.c.record_id == record_id))

    def _upsert(self, record_id: str, values: dict[str, Any]) -> None:
        row_id = self._row_id(record_id)
        if row_id is None:
            self.insert(_PRESENCE, {"id": new_id(), "record_id": record_id, **values})
        else:
            self.execute(update(_PRESENCE).where(_PRESENCE.c.id == row_id).values(values))

    # -- category presence ---------------------------------------------------

    def get(
        self,
        record_id: str,
        table: EffectTable | str,
        defs: Sequence[FieldDefinition],
        country_accounts_id: str | None = None,
    ) -> dict[str, bool]:
        """Answered presence flags keyed by metric ``js_name``.

        Unanswered metrics are omitted. No presence row gives ``{}``.
        """
        table = resolve_table(table)
        metrics = self._metric_columns(table, defs)
        if not metrics:
            return {}
        stmt = select(*[_PRESENCE.c[col] for _, col in metrics]).where(
            _PRESENCE.c.record_id == record_id
        )
        if country_accounts_id is not None:
            stmt = stmt.join(_RECORDS, _RECORDS.c.id == _PRESENCE.c.record_id).where(
                _RECORDS.c.country_accounts_id == country_accounts_id
            )
        row = self.execute(stmt).first()
        if row is None:
            return {}
        return {
            d.js_name: bool(value)
            for (d, _), value in zip(metrics, row)
            if value is not None
        }

    def set(
        self,
        record_id: str,
        table: EffectTable | str,
        defs: Sequence[FieldDefinition],
        data: Mapping[str, bool | None],
    ) -> None:
        """Write every metric column of ``defs``. Absent keys are stored as ``NULL``."""
        table = resolve_table(table)
        values: dict[str, Any] = {}
        for d, col in self._metric_columns(table, defs):
            value = data.get(d.js_name)
            values[col] = None if value is None else bool(value)
        if not values:
            return
        self._upsert(record_id, values)
        logger.debug("he_presence_set", record_id=record_id, table=table.value, values=values)

    def delete_all(self, record_id: str) -> None:
        """Remove the presence row of ``record_id``, if any."""
        self.execute(delete(_PRESENCE).where(_PRESENCE.c.record_id == record_id))
        logger.debug("he_presence_deleted", record_id=record_id)

    # -- total group flags ---------------------------------------------------

    def total_group_get(
        self, record_id: str, table: EffectTable | str
    ) -> list[TotalGroupFlag] | None:
        table = resolve_table(table)
        column = table.schema.total_group_column
        raw = self.scalar(select(_PRESENCE.c[column]).where(_PRESENCE.c.record_id == record_id))
        if raw is None:
            return None
        try:
            if not isinstance(raw, list):
                raise ValueError(f"expected a list, got {type(raw).__name__}")
            return [TotalGroupFlag.from_json(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                "he_total_group_malformed",
                record_id=record_id,
                table=table.value,
                error=str(e),
            )
            return None

    def total_group_set(
        self,
        record_id: str,
        table: EffectTable | str,
        flags: Iterable[TotalGroupFlag | Mapping[str, Any]] | None,
    ) -> None:
        """Store the table's total-group flags. ``None`` clears them."""
        table = resolve_table(table)
        column = table.schema.total_group_column
        if flags is None:
            if self._row_id(record_id) is None:
                return
            value = None
        else:
            value = [TotalGroupFlag.coerce(f).to_json() for f in flags]
        self._upsert(record_id, {column: value})
        logger.debug("he_total_group_set", record_id=record_id, table=table.value, flags=value)


__all__ = [
    "TotalGroupFlag",
    "presence_column",
    "CategoryPresenceRepository",
]
