"""
Row validation and normalization.

``validate_row`` checks one raw row against an ordered list of field
definitions and returns the normalized values ready for storage.

Values are tri-state:

- ``UNSET``: the field was not supplied. Allowed only for partial updates,
  where it means "leave the stored value alone".
- ``None``: explicit clear.
- ``""``: in string mode only, an alternative spelling of ``None``.

Examples:
    >>> from dts.human_effects.definitions import table_definitions
    >>> defs = table_definitions("Missing")
    >>> validate_row(defs, ["2024-03-01", "12"], string_mode=True).unwrap()
    [datetime.date(2024, 3, 1), 12]
    >>> validate_row(defs, [None, UNSET], allow_partial=True).unwrap()
    [None, UNSET]
"""

from __future__ import annotations

import datetime
import math
from collections.abc import Mapping, Sequence
from typing import Any

from dateutil import parser as date_parser

from dts.core.errors import HEErrorCode, HumanEffectsError, UnknownFieldFormatError
from dts.core.result import Err, Ok, Result
from dts.human_effects.definitions import FieldDefinition, FieldFormat


class _Unset:
    """Marker for a field that was not supplied."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

RawRow = Sequence[Any] | Mapping[str, Any]


def positional_row(defs: Sequence[FieldDefinition], raw_row: RawRow) -> list[Any]:
    """Align a raw row with ``defs``.

    Mappings are keyed by ``js_name``; absent keys become ``UNSET``. Short
    sequences are padded with ``UNSET``.
    """
    if isinstance(raw_row, Mapping):
        return [raw_row.get(d.js_name, UNSET) for d in defs]
    row = list(raw_row)
    if len(row) < len(defs):
        row.extend([UNSET] * (len(defs) - len(row)))
    return row


def _invalid(message: str) -> Err[list[Any]]:
    return Err(HumanEffectsError(HEErrorCode.INVALID_VALUE, message))


def _is_native_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_number(value: int | float) -> int | float | None:
    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def parse_date(value: str) -> datetime.date | None:
    """Parse an ISO-8601 date string, returning ``None`` when it is not one.

    A time part is accepted and dropped. Partial input such as ``"5"`` or
    ``"March 5"`` is rejected rather than completed from today's date.
    """
    text = value.strip()
    if not text:
        return None
    try:
        return date_parser.isoparse(text).date()
    except (ValueError, OverflowError):
        return None


def _validate_value(d: FieldDefinition, value: Any, string_mode: bool) -> Result[Any]:
    match d.format:
        case FieldFormat.ENUM:
            if not isinstance(value, str) or value not in d.enum_keys:
                return _invalid(f'Invalid enum value "{value}" for field "{d.js_name}"')
            return Ok(value)

        case FieldFormat.NUMBER:
            if string_mode and isinstance(value, str):
                try:
                    parsed = float(value.strip())
                except ValueError:
                    parsed = math.nan
                number = _normalize_number(parsed)
                if number is None:
                    return _invalid(f'Invalid number string "{value}" for field "{d.js_name}"')
                return Ok(number)
            number = _normalize_number(value) if _is_native_number(value) else None
            if number is None:
                return _invalid(f'Invalid number value "{value}" for field "{d.js_name}"')
            return Ok(number)

        case FieldFormat.DATE:
            if isinstance(value, datetime.datetime):
                return Ok(value.date())
            if isinstance(value, datetime.date):
                return Ok(value)
            if not isinstance(value, str):
                return _invalid(f'Invalid date type, not a string "{value}" for field "{d.js_name}"')
            parsed_date = parse_date(value)
            if parsed_date is None:
                return _invalid(f'Invalid date format "{value}" for field "{d.js_name}"')
            return Ok(parsed_date)

    raise UnknownFieldFormatError(d.db_name, d.format)


def validate_row(
    defs: Sequence[FieldDefinition],
    raw_row: RawRow,
    string_mode: bool = False,
    allow_partial: bool = False,
) -> Result[list[Any]]:
    """Validate and normalize one row.

    Args:
        defs: Ordered field definitions.
        raw_row: Positional values aligned with ``defs``, or a mapping keyed
            by ``js_name``.
        string_mode: Values arrive as strings (form/CSV input). Numbers are
            parsed and ``""`` means ``None``.
        allow_partial: ``UNSET`` values are kept instead of rejected.

    Returns:
        ``Ok(values)`` with one entry per definition, or
        ``Err(HumanEffectsError(invalid_value))`` for the first bad field.

    Raises:
        UnknownFieldFormatError: a definition has a format this validator
            does not handle.
    """
    row = positional_row(defs, raw_row)
    if len(row) > len(defs):
        return Err(HumanEffectsError(
            HEErrorCode.OTHER,
            f"Row has {len(row)} values but {len(defs)} fields are defined",
        ))

    values: list[Any] = []
    for d, value in zip(defs, row):
        if value is UNSET:
            if allow_partial:
                values.append(UNSET)
                continue
            return _invalid("Undefined value in row")
        if string_mode and value == "":
            values.append(None)
            continue
        if value is None:
            values.append(None)
            continue
        result = _validate_value(d, value, string_mode)
        if result.is_err():
            return result
        values.append(result.unwrap())
    return Ok(values)


__all__ = [
    "UNSET",
    "RawRow",
    "positional_row",
    "parse_date",
    "validate_row",
]
