"""
Human-effects operations.

Transport-agnostic entry points for loading, saving and clearing the
disaggregated rows of a disaster record. Each call runs in one transaction
on ``ctx.session``: any domain error rolls back everything the call did and
comes back as a failed :class:`OperationResult`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from dts.core.errors import (
    DtsError,
    ErrorCategory,
    HEErrorCode,
    HumanEffectsError,
    RowErrors,
    UnknownEffectTableError,
)
from dts.core.logging import LogContext, get_logger
from dts.core.orm.session import transaction
from dts.human_effects.definitions import FieldDefinition
from dts.human_effects.presence import CategoryPresenceRepository
from dts.human_effects.registry import DefinitionRegistry
from dts.human_effects.repository import EffectRows, HumanEffectsRepository
from dts.human_effects.tables import EffectTable, effect_table_from_string
from dts.human_effects.validation import UNSET
from dts.ops.context import OperationContext
from dts.ops.requests import SaveEffectsRequest
from dts.ops.responses import (
    ClearEffectsResult,
    DeleteAllEffectsResult,
    EffectsData,
    SaveEffectsResult,
)
from dts.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def _invalid_table(exc: UnknownEffectTableError, elapsed_ms: float) -> OperationResult[Any]:
    return OperationResult.fail(
        "INVALID_TABLE",
        exc.message,
        category=ErrorCategory.VALIDATION,
        elapsed_ms=elapsed_ms,
    )


def _database_failure(op: str, exc: SQLAlchemyError, elapsed_ms: float) -> OperationResult[Any]:
    logger.exception("op_failed", op=op, error=str(exc))
    return OperationResult.fail(
        "DATABASE",
        f"{op} failed: {exc}",
        category=ErrorCategory.DATABASE,
        elapsed_ms=elapsed_ms,
    )


def sparse_updates_to_rows(
    updates: Mapping[str, Mapping[int, Any]], width: int
) -> tuple[list[str], list[list[Any]]]:
    """Expand ``{row_id: {column_index: value}}`` into ``UNSET``-filled rows."""
    ids: list[str] = []
    rows: list[list[Any]] = []
    for row_id, cols in updates.items():
        row = [UNSET] * width
        for index, value in cols.items():
            if not 0 <= index < width:
                raise HumanEffectsError(
                    HEErrorCode.OTHER,
                    f"Column index {index} out of range",
                    row_id=row_id,
                )
            row[index] = value
        ids.append(row_id)
        rows.append(row)
    return ids, rows


def presence_from_rows(defs: Sequence[FieldDefinition], rows: EffectRows) -> dict[str, bool | None]:
    """Derive presence flags from stored rows.

    A metric is tracked when at least one row holds a value for it. With no
    rows left every flag is unanswered.
    """
    presence: dict[str, bool | None] = {}
    for i, d in enumerate(defs):
        if not d.is_metric or d.custom:
            continue
        if not rows.data:
            presence[d.js_name] = None
        else:
            presence[d.js_name] = any(row[i] is not None for row in rows.data)
    return presence


# ------------------------------------------------------------------ #
# Load
# ------------------------------------------------------------------ #


def load_effects(
    ctx: OperationContext,
    record_id: str,
    table: EffectTable | str | None = None,
    country_accounts_id: str | None = None,
) -> OperationResult[EffectsData]:
    """Definitions, rows, category presence and total-group flags of one table.

    ``table`` defaults to Deaths.
    """
    timer = start_timer()
    try:
        tbl = effect_table_from_string(table or EffectTable.DEATHS)
    except UnknownEffectTableError as exc:
        return _invalid_table(exc, timer.elapsed_ms)
    tenant = country_accounts_id or ctx.country_accounts_id

    try:
        with transaction(ctx.session):
            defs = DefinitionRegistry(ctx.session).definitions_for_table(tbl)
            rows = HumanEffectsRepository(ctx.session).get(tbl, record_id, defs, tenant).unwrap()
            presence = CategoryPresenceRepository(ctx.session)
            category_presence = presence.get(record_id, tbl, defs, tenant)
            flags = presence.total_group_get(record_id, tbl)
    except DtsError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except SQLAlchemyError as exc:
        return _database_failure("load_effects", exc, timer.elapsed_ms)

    return OperationResult.ok(
        EffectsData(
            table=tbl.value,
            record_id=record_id,
            defs=defs,
            ids=rows.ids,
            data=rows.data,
            category_presence=category_presence,
            total_group_flags=flags,
        ),
        elapsed_ms=timer.elapsed_ms,
    )


# ------------------------------------------------------------------ #
# Save
# ------------------------------------------------------------------ #


def save_effects(
    ctx: OperationContext,
    record_id: str,
    request: SaveEffectsRequest,
) -> OperationResult[SaveEffectsResult]:
    """Apply flags, deletes, updates and new rows in one transaction.

    After the writes the table is checked for duplicate dimension rows.
    Errors on newly created rows are reported under the caller's temporary
    ids. When rows changed, category presence is recomputed from the data.
    """
    timer = start_timer()
    try:
        tbl = effect_table_from_string(request.table)
    except UnknownEffectTableError as exc:
        return _invalid_table(exc, timer.elapsed_ms)

    session = ctx.session
    repo = HumanEffectsRepository(session)
    presence = CategoryPresenceRepository(session)

    with LogContext(record_id=record_id, table=tbl.value, request_id=ctx.request_id):
        try:
            with transaction(session):
                defs = DefinitionRegistry(session).definitions_for_table(tbl)
                expected = [d.js_name for d in defs]

                if request.has_rows and list(request.columns or []) != expected:
                    message = (
                        "when passing data, columns are also required"
                        if request.columns is None
                        else "columns passed do not match expected"
                    )
                    return OperationResult.fail(
                        "COLUMNS_MISMATCH",
                        message,
                        category=ErrorCategory.VALIDATION,
                        details={"expected": expected, "got": request.columns},
                        elapsed_ms=timer.elapsed_ms,
                    )

                if request.total_group_flags is not UNSET:
                    presence.total_group_set(record_id, tbl, request.total_group_flags)

                deleted: list[str] = []
                updated: list[str] = []
                created: dict[str, str] = {}

                if request.deletes:
                    deleted = repo.delete_rows(tbl, request.deletes).unwrap()

                if request.updates:
                    ids, rows = sparse_updates_to_rows(request.updates, len(defs))
                    updated = repo.update(tbl, defs, ids, rows, request.string_mode).unwrap()

                temp_ids: dict[str, str] = {}
                for temp_id, row in request.new_rows.items():
                    res = repo.create(tbl, record_id, defs, [row], request.string_mode)
                    if res.is_err() and isinstance(res.error, HumanEffectsError):
                        res.error.row_id = temp_id
                    row_id = res.unwrap()[0]
                    created[temp_id] = row_id
                    temp_ids[row_id] = temp_id

                check = repo.validate(tbl, record_id, defs, ctx.country_accounts_id)
                if check.is_err():
                    error = check.error
                    if isinstance(error, RowErrors):
                        for e in error.errors:
                            e.row_id = temp_ids.get(e.row_id, e.row_id)
                    raise error

                data_modified = bool(request.has_rows)
                if data_modified:
                    current = repo.get(tbl, record_id, defs, ctx.country_accounts_id).unwrap()
                    metrics = presence_from_rows(defs, current)
                    if metrics:
                        presence.set(record_id, tbl, defs, metrics)
        except DtsError as exc:
            logger.info("he_save_rejected", error=exc.to_dict())
            return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
        except SQLAlchemyError as exc:
            return _database_failure("save_effects", exc, timer.elapsed_ms)

        logger.info(
            "he_save_completed",
            deleted=len(deleted),
            updated=len(updated),
            created=len(created),
        )

    return OperationResult.ok(
        SaveEffectsResult(
            table=tbl.value,
            deleted=deleted,
            updated=updated,
            created=created,
            data_modified=data_modified,
        ),
        elapsed_ms=timer.elapsed_ms,
    )


# ------------------------------------------------------------------ #
# Clear
# ------------------------------------------------------------------ #


def clear_effects(
    ctx: OperationContext,
    record_id: str,
    table: EffectTable | str,
) -> OperationResult[ClearEffectsResult]:
    """Delete every row of ``table`` for ``record_id``."""
    timer = start_timer()
    try:
        tbl = effect_table_from_string(table)
    except UnknownEffectTableError as exc:
        return _invalid_table(exc, timer.elapsed_ms)

    try:
        with transaction(ctx.session):
            deleted = HumanEffectsRepository(ctx.session).clear_data(tbl, record_id).unwrap()
    except DtsError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except SQLAlchemyError as exc:
        return _database_failure("clear_effects", exc, timer.elapsed_ms)

    return OperationResult.ok(
        ClearEffectsResult(table=tbl.value, rows_deleted=len(deleted)),
        elapsed_ms=timer.elapsed_ms,
    )


def delete_all_effects(
    ctx: OperationContext,
    record_id: str,
) -> OperationResult[DeleteAllEffectsResult]:
    """Clear every effect table of ``record_id`` and drop its presence row."""
    timer = start_timer()
    counts: dict[str, int] = {}
    try:
        with transaction(ctx.session):
            repo = HumanEffectsRepository(ctx.session)
            for tbl in EffectTable:
                counts[tbl.value] = len(repo.clear_data(tbl, record_id).unwrap())
            repo.presence.delete_all(record_id)
    except DtsError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except SQLAlchemyError as exc:
        return _database_failure("delete_all_effects", exc, timer.elapsed_ms)

    logger.info("he_record_cleared", record_id=record_id, rows_deleted=counts)
    return OperationResult.ok(
        DeleteAllEffectsResult(record_id=record_id, rows_deleted=counts),
        elapsed_ms=timer.elapsed_ms,
    )
