"""Deterministic row ordering and dimension comparison.

``get`` returns rows sorted column by column so that two reads of the same
data always agree, whatever order the database produced them in.

Examples:
    >>> sort_rows(["a", "b"], [["m", 1], ["f", 2]])
    (['b', 'a'], [['f', 2], ['m', 1]])
    >>> compare_rows([None, 1], ["f", 0])
    -1
"""

from __future__ import annotations

import functools
from collections.abc import Sequence
from typing import Any

from dts.human_effects.definitions import FieldDefinition


def _compare_values(a: Any, b: Any) -> int:
    if a is None or b is None:
        if a is None and b is None:
            return 0
        return -1 if a is None else 1
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        # incomparable types
        ka = (type(a).__name__, str(a))
        kb = (type(b).__name__, str(b))
        return (ka > kb) - (ka < kb)


def compare_rows(a: Sequence[Any], b: Sequence[Any]) -> int:
    """Compare two rows left to right. ``None`` sorts first."""
    for x, y in zip(a, b):
        c = _compare_values(x, y)
        if c:
            return c
    return (len(a) > len(b)) - (len(a) < len(b))


def sort_rows(ids: Sequence[str], data: Sequence[Sequence[Any]]) -> tuple[list[str], list[list[Any]]]:
    """Stable-sort rows by :func:`compare_rows`, keeping ids aligned."""
    pairs = sorted(
        zip(ids, data),
        key=functools.cmp_to_key(lambda p, q: compare_rows(p[1], q[1])),
    )
    return [i for i, _ in pairs], [list(row) for _, row in pairs]


def same_dimensions(defs: Sequence[FieldDefinition], a: Sequence[Any], b: Sequence[Any]) -> bool:
    """True when the rows agree on every dimension column."""
    for i, d in enumerate(defs):
        if d.is_dimension and a[i] != b[i]:
            return False
    return True


__all__ = ["compare_rows", "sort_rows", "same_dimensions"]
