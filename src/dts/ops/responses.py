"""
Typed response objects for operations.

Each dataclass is the *output* of one operation beyond the generic
:class:`~dts.ops.result.OperationResult` envelope.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any

from dts.human_effects.definitions import FieldDefinition
from dts.human_effects.presence import TotalGroupFlag

# ------------------------------------------------------------------ #
# Database responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class DatabaseInitResult:
    """Result payload for :func:`dts.ops.database.initialize_database`."""

    tables_created: list[str]


# ------------------------------------------------------------------ #
# Human effects responses
# ------------------------------------------------------------------ #


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


def definition_to_dict(d: FieldDefinition) -> dict[str, Any]:
    out: dict[str, Any] = {
        "uiName": d.ui_name,
        "jsName": d.js_name,
        "dbName": d.db_name,
        "format": d.format.value,
        "role": d.role.value,
    }
    if d.shared:
        out["shared"] = True
    if d.custom:
        out["custom"] = True
    if d.enum_values:
        out["data"] = [{"key": o.key, "label": o.label} for o in d.enum_values]
    if d.ui_col_width:
        out["uiColWidth"] = d.ui_col_width
    return out


@dataclass(frozen=True, slots=True)
class EffectsData:
    """Result payload for :func:`dts.ops.human_effects.load_effects`."""

    table: str
    record_id: str
    defs: list[FieldDefinition]
    ids: list[str]
    data: list[list[Any]]
    category_presence: dict[str, bool] = field(default_factory=dict)
    total_group_flags: list[TotalGroupFlag] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "recordId": self.record_id,
            "defs": [definition_to_dict(d) for d in self.defs],
            "ids": list(self.ids),
            "data": [[_json_value(v) for v in row] for row in self.data],
            "categoryPresence": dict(self.category_presence),
            "totalGroupFlags": (
                None if self.total_group_flags is None
                else [f.to_json() for f in self.total_group_flags]
            ),
        }


@dataclass(frozen=True, slots=True)
class SaveEffectsResult:
    """Result payload for :func:`dts.ops.human_effects.save_effects`.

    ``created`` maps each client temporary id to the stored row id.
    """

    table: str
    deleted: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    created: dict[str, str] = field(default_factory=dict)
    data_modified: bool = False


@dataclass(frozen=True, slots=True)
class ClearEffectsResult:
    """Result payload for :func:`dts.ops.human_effects.clear_effects`."""

    table: str
    rows_deleted: int


@dataclass(frozen=True, slots=True)
class DeleteAllEffectsResult:
    """Result payload for :func:`dts.ops.human_effects.delete_all_effects`."""

    record_id: str
    rows_deleted: dict[str, int] = field(default_factory=dict)
