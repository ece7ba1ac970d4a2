"""
Structured error types for the disaster-tracking human-effects layer.

Every failure the library knows about is a :class:`DtsError`. Each one carries
a category, a retry hint, structured context and an optional chained cause.
Expected domain failures (a bad cell value, duplicate disaggregation rows,
a missing row id) are *returned* wrapped in :class:`~dts.core.result.Err`.
Programmer errors (an unknown effect table, an unknown field format) are
*raised*.

Manifesto:
    - **Typed Error Hierarchy:** Domain codes the UI can render per field/row
    - **Values, not exceptions, for expected failures:** ``Err(HumanEffectsError)``
    - **Raise for defects:** unknown tables/formats are bugs, not user input
    - **Rich Context:** Errors carry metadata for structured logging

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                          DtsError                               │
        │        (category, retryable, context, cause)                    │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                 │
        │  HumanEffectsError        RowErrors          ConfigError        │
        │  (code, row_id)           (errors[])         (CONFIG)           │
        │                                                  │              │
        │  UnknownEffectTableError                    InvalidConfigError  │
        │  UnknownFieldFormatError                                        │
        │  UnsupportedFieldError     (INTERNAL - raised, never returned)  │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> err = HumanEffectsError(HEErrorCode.INVALID_VALUE, "bad value")
    >>> err.code
    <HEErrorCode.INVALID_VALUE: 'invalid_value'>
    >>> err.to_dict()["code"]
    'invalid_value'

Tags:
    errors, error-hierarchy, human-effects, validation, dts

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        DATABASE: Connection, query or integrity failures
        VALIDATION: Row values that fail type/format/enum checks
        CONFIG: Missing or invalid disaggregation configuration
        INTERNAL: Bugs and unreachable states
        UNKNOWN: Uncategorized errors
    """

    DATABASE = "DATABASE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Typed fields cover the identifiers that show up in nearly every
    human-effects failure. Anything else goes into ``metadata``.

    Examples:
        >>> ctx = ErrorContext(table="Injured", record_id="r-1")
        >>> ctx.to_dict()
        {'table': 'Injured', 'record_id': 'r-1'}
    """

    table: str | None = None
    record_id: str | None = None
    row_id: str | None = None
    field: str | None = None
    metadata: dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["table", "record_id", "row_id", "field"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DtsError(Exception):
    """
    Base exception for all disaster-tracking errors.

    Subclasses set ``default_category`` and ``default_retryable`` so that
    callers get sensible defaults without repeating them at every raise site.

    Examples:
        >>> error = DtsError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> DtsError("x", context=ErrorContext(table="Deaths")).to_dict()["context"]
        {'table': 'Deaths'}
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# HUMAN EFFECTS DOMAIN ERRORS (returned as Err values)
# =============================================================================


class HEErrorCode(str, Enum):
    """Machine-readable codes surfaced to the UI layer."""

    INVALID_VALUE = "invalid_value"
    DUPLICATE_DIMENSION = "duplicate_dimension"
    # wire value spelled as the data-entry UI expects it
    NO_DIMENSION_DATA = "no_dimention_data"
    OTHER = "other"


class HumanEffectsError(DtsError):
    """
    A recoverable human-effects failure tied to a code and optionally a row.

    ``invalid_value`` aborts the enclosing row loop at the first bad field.
    ``duplicate_dimension`` and ``no_dimention_data`` are only produced by
    validation and are collected for every offending row. ``other`` covers
    structural problems such as an id/row count mismatch or an unknown row id.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        code: HEErrorCode | str,
        message: str,
        *,
        row_id: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.code = HEErrorCode(code)
        self.row_id = row_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "rowId": self.row_id,
        }

    def __repr__(self) -> str:
        return f"HumanEffectsError({self.code.value!r}, {self.message!r}, row_id={self.row_id!r})"


class RowErrors(DtsError):
    """Several per-row errors reported together (duplicate dimensions)."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, errors: list[HumanEffectsError], message: str | None = None):
        super().__init__(message or f"{len(errors)} row(s) failed validation")
        self.errors = errors

    def to_dict(self) -> dict[str, Any]:
        return {"errors": [e.to_dict() for e in self.errors]}


# =============================================================================
# PROGRAMMER ERRORS (raised, never returned)
# =============================================================================


class UnknownEffectTableError(DtsError):
    """Effect table identifier is not one of the six known kinds."""

    def __init__(self, table: Any):
        self.table = table
        super().__init__(f"Invalid table type: {table}")


class UnknownFieldFormatError(DtsError):
    """Field definition carries a format the validator does not know."""

    def __init__(self, field_name: str, fmt: Any):
        self.field_name = field_name
        self.format = fmt
        super().__init__(f"Unknown def type {fmt!r} for field {field_name!r}")


class UnsupportedFieldError(DtsError):
    """Field definition cannot be used in this operation."""

    pass


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DtsError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DtsError",
    "HEErrorCode",
    "HumanEffectsError",
    "RowErrors",
    "UnknownEffectTableError",
    "UnknownFieldFormatError",
    "UnsupportedFieldError",
    "ConfigError",
    "InvalidConfigError",
]
