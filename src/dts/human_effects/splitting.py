"""Partition definitions (and rows aligned with them) by storage location."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from dts.human_effects.definitions import FieldDefinition


@dataclass(frozen=True, slots=True)
class SplitRow:
    """One row's values grouped by storage location."""

    shared: list[Any]
    custom: dict[str, Any]
    not_shared: list[Any]


@dataclass(frozen=True)
class DefinitionSplit:
    """Definitions grouped into shared, custom and table-specific columns.

    ``split_row`` must be called with values aligned with the same ``defs``
    the split was built from.
    """

    defs: tuple[FieldDefinition, ...]
    shared: list[FieldDefinition] = field(default_factory=list)
    custom: list[FieldDefinition] = field(default_factory=list)
    not_shared: list[FieldDefinition] = field(default_factory=list)

    def split_row(self, values: Sequence[Any]) -> SplitRow:
        shared: list[Any] = []
        custom: dict[str, Any] = {}
        not_shared: list[Any] = []
        for d, value in zip(self.defs, values):
            if d.custom:
                custom[d.db_name] = value
            elif d.shared:
                shared.append(value)
            else:
                not_shared.append(value)
        return SplitRow(shared, custom, not_shared)


def split_definitions(defs: Sequence[FieldDefinition]) -> DefinitionSplit:
    split = DefinitionSplit(tuple(defs))
    for d in split.defs:
        if d.custom:
            split.custom.append(d)
        elif d.shared:
            split.shared.append(d)
        else:
            split.not_shared.append(d)
    return split


__all__ = ["SplitRow", "DefinitionSplit", "split_definitions"]
