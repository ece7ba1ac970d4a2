"""
CRUD over disaggregated human-effects rows.

Manifesto:
    A logical effect row is stored as two physical rows joined 1:1: the
    ``human_dsg`` aggregate (record id, shared dimensions, custom JSON map)
    and a row in the effect table (table-specific dimensions and metrics).
    Callers never see that split. They pass rows aligned with a definition
    list and get rows aligned with it back.

    - **Values, not exceptions:** bad input comes back as ``Err``
    - **Caller owns the transaction:** the repository only executes
    - **Fail fast:** the first bad row stops create/update/delete

Architecture:
    ::

        defs ──► split_definitions ──► shared  ─► human_dsg.<col>
                                      custom  ─► human_dsg.custom[<key>]
                                      not_shared ─► <effect table>.<col>

        create  : validate ► split ► INSERT human_dsg ► INSERT effect row
        update  : validate(partial) ► split ► UPDATE supplied columns only
        delete  : DELETE effect row ► DELETE human_dsg
        get     : effect ⋈ human_dsg (⋈ disaster_records) ► sort_rows
        validate: get ► empty rows ► no_dimention_data
                  other rows pairwise same_dimensions ► duplicate_dimension

Examples:
    >>> repo = HumanEffectsRepository(session)
    >>> ids = repo.create(EffectTable.INJURED, record_id, defs, [["m", 1]]).unwrap()
    >>> repo.get(EffectTable.INJURED, record_id, defs).unwrap().data
    [['m', 1]]

Tags:
    dts, human-effects, repository, crud, disaggregation

Doc-Types:
    - API Reference
    - Data Model
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import ColumnElement, Table, delete, select, update

from dts.core.errors import HEErrorCode, HumanEffectsError, RowErrors, UnsupportedFieldError
from dts.core.logging import get_logger
from dts.core.orm.tables import DisasterRecordTable, HumanDsgTable, new_id
from dts.core.repository import SessionRepository
from dts.core.result import Err, Ok, Result
from dts.human_effects.definitions import FieldDefinition
from dts.human_effects.ordering import same_dimensions, sort_rows
from dts.human_effects.presence import CategoryPresenceRepository
from dts.human_effects.splitting import DefinitionSplit, split_definitions
from dts.human_effects.tables import EffectTable, resolve_table
from dts.human_effects.validation import UNSET, RawRow, validate_row

logger = get_logger(__name__)

_DSG = HumanDsgTable.__table__
_RECORDS = DisasterRecordTable.__table__

DUPLICATE_MESSAGE = "Two or more rows have the same disaggregation values."
NO_DATA_MESSAGE = "Row has no disaggregation values."


@dataclass(frozen=True)
class EffectRows:
    """Rows of one effect table for one record, aligned with ``defs``."""

    defs: list[FieldDefinition]
    ids: list[str] = field(default_factory=list)
    data: list[list[Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ids)


def _other(message: str, row_id: str | None = None) -> Err[Any]:
    return Err(HumanEffectsError(HEErrorCode.OTHER, message, row_id=row_id))


def _check_columns(table: EffectTable, split: DefinitionSplit) -> None:
    for d in split.shared:
        if d.db_name not in _DSG.c:
            raise UnsupportedFieldError(f"Shared field {d.db_name!r} has no human_dsg column")
    effect = table.schema.table
    for d in split.not_shared:
        if d.db_name not in effect.c:
            raise UnsupportedFieldError(
                f"Field {d.db_name!r} has no column on {effect.name!r}"
            )


class HumanEffectsRepository(SessionRepository):
    """Create, read, update and delete disaggregated effect rows."""

    def __init__(self, session: Any) -> None:
        super().__init__(session)
        self.presence = CategoryPresenceRepository(session)

    # -- helpers -------------------------------------------------------------

    def _dsg_id(self, effect: Table, row_id: str) -> str | None:
        return self.scalar(select(effect.c.dsg_id).where(effect.c.id == row_id))

    # -- create --------------------------------------------------------------

    def create(
        self,
        table: EffectTable | str,
        record_id: str,
        defs: Sequence[FieldDefinition],
        rows: Sequence[RawRow],
        string_mode: bool = False,
    ) -> Result[list[str]]:
        """Insert rows in order and return the new effect-row ids.

        Stops at the first invalid row. Rows inserted before it stay in the
        caller's transaction, so callers roll back on ``Err``.
        """
        table = resolve_table(table)
        effect = table.schema.table
        split = split_definitions(defs)
        _check_columns(table, split)

        ids: list[str] = []
        for row in rows:
            res = validate_row(defs, row, string_mode, allow_partial=False)
            if res.is_err():
                logger.info(
                    "he_row_invalid",
                    table=table.value,
                    record_id=record_id,
                    error=str(res.error),
                )
                return res
            values = split.split_row(res.unwrap())

            dsg_id = new_id()
            self.insert(_DSG, {
                "id": dsg_id,
                "record_id": record_id,
                "custom": values.custom,
                **{d.db_name: v for d, v in zip(split.shared, values.shared)},
            })
            row_id = new_id()
            self.insert(effect, {
                "id": row_id,
                "dsg_id": dsg_id,
                **{d.db_name: v for d, v in zip(split.not_shared, values.not_shared)},
            })
            ids.append(row_id)

        logger.info("he_rows_created", table=table.value, record_id=record_id, count=len(ids))
        return Ok(ids)

    # -- read ----------------------------------------------------------------

    def get(
        self,
        table: EffectTable | str,
        record_id: str,
        defs: Sequence[FieldDefinition],
        country_accounts_id: str | None = None,
    ) -> Result[EffectRows]:
        """All rows of ``table`` for ``record_id``, sorted by :func:`compare_rows`.

        When ``country_accounts_id`` is given, rows of records owned by a
        different tenant are not returned.
        """
        table = resolve_table(table)
        effect = table.schema.table
        split = split_definitions(defs)
        _check_columns(table, split)

        columns: list[ColumnElement[Any]] = [effect.c.id, _DSG.c.custom]
        for d in defs:
            if d.custom:
                continue
            columns.append(_DSG.c[d.db_name] if d.shared else effect.c[d.db_name])

        from_ = effect.join(_DSG, effect.c.dsg_id == _DSG.c.id)
        stmt = select(*columns).where(_DSG.c.record_id == record_id)
        if country_accounts_id is not None:
            from_ = from_.join(_RECORDS, _RECORDS.c.id == _DSG.c.record_id)
            stmt = stmt.where(_RECORDS.c.country_accounts_id == country_accounts_id)
        stmt = stmt.select_from(from_)

        ids: list[str] = []
        data: list[list[Any]] = []
        for row in self.execute(stmt):
            custom = row[1] or {}
            stored = iter(row[2:])
            values = [custom.get(d.db_name) if d.custom else next(stored) for d in defs]
            ids.append(row[0])
            data.append(values)

        ids, data = sort_rows(ids, data)
        return Ok(EffectRows(list(defs), ids, data))

    # -- validate ------------------------------------------------------------

    def validate(
        self,
        table: EffectTable | str,
        record_id: str,
        defs: Sequence[FieldDefinition],
        country_accounts_id: str | None = None,
    ) -> Result[None]:
        """Check that no two stored rows share all dimension values.

        A row with no values at all is reported as ``no_dimention_data`` and
        left out of the duplicate check. Both rows of every duplicate pair are
        reported. Each row id appears once and errors are ordered by row id.
        """
        table = resolve_table(table)
        res = self.get(table, record_id, defs, country_accounts_id)
        if res.is_err():
            return res
        rows = res.unwrap()

        errors: dict[str, HumanEffectsError] = {}
        candidates: list[int] = []
        for i, (row_id, row) in enumerate(zip(rows.ids, rows.data)):
            if all(v is None for v in row):
                errors[row_id] = HumanEffectsError(
                    HEErrorCode.NO_DIMENSION_DATA, NO_DATA_MESSAGE, row_id=row_id
                )
            else:
                candidates.append(i)

        for n, i in enumerate(candidates):
            for j in candidates[n + 1:]:
                if not same_dimensions(defs, rows.data[i], rows.data[j]):
                    continue
                for row_id in (rows.ids[i], rows.ids[j]):
                    if row_id not in errors:
                        errors[row_id] = HumanEffectsError(
                            HEErrorCode.DUPLICATE_DIMENSION, DUPLICATE_MESSAGE, row_id=row_id
                        )

        if errors:
            ordered = [errors[k] for k in sorted(errors)]
            logger.info(
                "he_validation_failed",
                table=table.value,
                record_id=record_id,
                row_ids=[e.row_id for e in ordered],
            )
            return Err(RowErrors(ordered))
        return Ok(None)

    # -- update --------------------------------------------------------------

    def update(
        self,
        table: EffectTable | str,
        defs: Sequence[FieldDefinition],
        ids: Sequence[str],
        rows: Sequence[RawRow],
        string_mode: bool = False,
    ) -> Result[list[str]]:
        """Apply partial updates. ``UNSET`` values leave the stored value alone."""
        table = resolve_table(table)
        effect = table.schema.table
        if len(ids) != len(rows):
            return _other("Mismatch between ids and data rows")
        split = split_definitions(defs)
        _check_columns(table, split)

        for row_id, row in zip(ids, rows):
            res = validate_row(defs, row, string_mode, allow_partial=True)
            if res.is_err():
                error = res.error
                if isinstance(error, HumanEffectsError) and error.row_id is None:
                    error.row_id = row_id
                logger.info("he_row_invalid", table=table.value, row_id=row_id, error=str(error))
                return res
            values = split.split_row(res.unwrap())

            dsg_id = self._dsg_id(effect, row_id)
            if dsg_id is None:
                return _other(f"Record not found for id: {row_id}", row_id)

            shared = {
                d.db_name: v for d, v in zip(split.shared, values.shared) if v is not UNSET
            }
            if shared:
                self.execute(update(_DSG).where(_DSG.c.id == dsg_id).values(shared))

            custom = {k: v for k, v in values.custom.items() if v is not UNSET}
            if custom:
                existing = self.scalar(select(_DSG.c.custom).where(_DSG.c.id == dsg_id)) or {}
                self.execute(
                    update(_DSG).where(_DSG.c.id == dsg_id).values(custom={**existing, **custom})
                )

            not_shared = {
                d.db_name: v
                for d, v in zip(split.not_shared, values.not_shared)
                if v is not UNSET
            }
            if not_shared:
                self.execute(update(effect).where(effect.c.id == row_id).values(not_shared))

        logger.info("he_rows_updated", table=table.value, count=len(ids))
        return Ok(list(ids))

    # -- delete --------------------------------------------------------------

    def delete_rows(self, table: EffectTable | str, ids: Sequence[str]) -> Result[list[str]]:
        """Delete effect rows and their aggregate rows."""
        table = resolve_table(table)
        effect = table.schema.table
        for row_id in ids:
            dsg_id = self._dsg_id(effect, row_id)
            if dsg_id is None:
                return _other(f"Record not found for id: {row_id}", row_id)
            self.execute(delete(effect).where(effect.c.id == row_id))
            self.execute(delete(_DSG).where(_DSG.c.id == dsg_id))

        logger.info("he_rows_deleted", table=table.value, count=len(ids))
        return Ok(list(ids))

    def clear_data(self, table: EffectTable | str, record_id: str) -> Result[list[str]]:
        """Delete every row of ``table`` for ``record_id`` and reset its total group."""
        table = resolve_table(table)
        effect = table.schema.table
        self.presence.total_group_set(record_id, table, None)
        ids = self.scalars(
            select(effect.c.id)
            .select_from(effect.join(_DSG, effect.c.dsg_id == _DSG.c.id))
            .where(_DSG.c.record_id == record_id)
        )
        return self.delete_rows(table, ids)


__all__ = [
    "DUPLICATE_MESSAGE",
    "NO_DATA_MESSAGE",
    "EffectRows",
    "HumanEffectsRepository",
]
