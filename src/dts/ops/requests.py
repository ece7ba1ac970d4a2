"""
Typed request objects for operations.

Each dataclass is the *input* contract of one operation function. Requests
carry transport-agnostic data: no raw HTTP bodies, no Typer params.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from dts.human_effects.validation import UNSET


@dataclass(frozen=True, slots=True)
class SaveEffectsRequest:
    """Request for :func:`dts.ops.human_effects.save_effects`.

    Attributes:
        table: Effect table name (``"Deaths"`` or ``"deaths"``).
        columns: ``js_name`` list the client built its rows from. Required
            whenever rows are passed and must match the current definitions.
        deletes: Effect-row ids to delete.
        updates: Sparse updates, ``{row_id: {column_index: value}}``.
        new_rows: Rows to create keyed by client-side temporary id.
        total_group_flags: ``[{dbName, isSet}]``, ``None`` to clear, or
            ``UNSET`` to leave the stored flags alone.
        string_mode: Values arrive as strings (``""`` means clear).
    """

    table: str
    columns: list[str] | None = None
    deletes: list[str] = field(default_factory=list)
    updates: dict[str, dict[int, Any]] = field(default_factory=dict)
    new_rows: dict[str, Any] = field(default_factory=dict)
    total_group_flags: Any = UNSET
    string_mode: bool = False

    @property
    def has_rows(self) -> bool:
        return bool(self.deletes or self.updates or self.new_rows)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> SaveEffectsRequest:
        """Build a request from the JSON save payload.

        Expected shape::

            {"table": "Deaths", "columns": [...],
             "data": {"deletes": [...], "updates": {...},
                      "newRows": {...}, "totalGroupFlags": [...]}}
        """
        data = payload.get("data") or {}
        updates = {
            str(row_id): {int(col): value for col, value in cols.items()}
            for row_id, cols in (data.get("updates") or {}).items()
        }
        return cls(
            table=payload.get("table") or "Deaths",
            columns=payload.get("columns"),
            deletes=list(data.get("deletes") or []),
            updates=updates,
            new_rows=dict(data.get("newRows") or {}),
            total_group_flags=data.get("totalGroupFlags", UNSET),
            string_mode=bool(payload.get("stringMode", False)),
        )
