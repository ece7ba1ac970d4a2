"""
Operation result envelope.

Provides :class:`OperationResult`, the success/failure envelope every
operation function returns. Unlike ``dts.core.result.Result`` (the Ok/Err
values the repositories return), ``OperationResult`` is meant for CLI and
SDK consumers and carries *warnings*, *elapsed_ms* and *metadata* alongside
the payload.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from dts.core.errors import DtsError, ErrorCategory, HumanEffectsError, RowErrors


@dataclass(frozen=True, slots=True)
class OperationError:
    """Structured error detail for failed operations.

    Attributes:
        code: Machine-readable code (``invalid_value``, ``NOT_FOUND``, …).
        message: Human-readable description of the error.
        category: Optional :class:`ErrorCategory` for routing.
        details: Extra key/value context (row errors, expected columns, …).
        retryable: Whether the caller should retry the operation.
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False


@dataclass
class OperationResult[T]:
    """Envelope returned by every operation function.

    Factory methods :meth:`ok`, :meth:`fail` and :meth:`from_error` should be
    used instead of the constructor directly.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Create a failed result."""
        return cls(
            success=False,
            error=OperationError(
                code=code,
                message=message,
                category=category,
                details=details or {},
                retryable=retryable,
            ),
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def from_error(cls, error: DtsError, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Create a failed result from a domain error."""
        if isinstance(error, RowErrors):
            code = error.errors[0].code.value if error.errors else "other"
            return cls.fail(
                code,
                error.message,
                category=error.category,
                details=error.to_dict(),
                elapsed_ms=elapsed_ms,
            )
        if isinstance(error, HumanEffectsError):
            details = {"rowId": error.row_id} if error.row_id else None
            return cls.fail(
                error.code.value,
                error.message,
                category=error.category,
                details=details,
                elapsed_ms=elapsed_ms,
            )
        return cls.fail(
            error.category.value,
            error.message,
            category=error.category,
            details=error.context.to_dict() or None,
            retryable=error.retryable,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (for JSON output)."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error is not None:
            d["error"] = {
                "code": self.error.code,
                "message": self.error.message,
                "retryable": self.error.retryable,
            }
            if self.error.details:
                d["error"]["details"] = self.error.details
        if self.warnings:
            d["warnings"] = self.warnings
        if self.elapsed_ms:
            d["elapsed_ms"] = round(self.elapsed_ms, 2)
        if self.metadata:
            d["metadata"] = self.metadata
        return d


class _Timer:
    """Minimal stopwatch for timing operations."""

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Return a lightweight timer. Use ``timer.elapsed_ms`` when done."""
    return _Timer()
