"""
Result envelope for consistent success/failure handling.

Human-effects operations return ``Ok[T]`` on success or ``Err[T]`` wrapping a
:class:`~dts.core.errors.HumanEffectsError` on an expected failure. Route
handlers and the ops layer can then render field-level messages without
try/except around every call. Only programmer errors are raised.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions for expected failures
    - **Pattern matching:** ``match`` on ``Ok(value)`` / ``Err(error)``
    - **Escape hatch:** ``unwrap()`` on an ``Err`` raises the wrapped error,
      which the ops layer uses to roll a transaction back

Examples:
    >>> from dts.core.result import Ok, Err, Result
    >>> def halve(n: int) -> Result[int]:
    ...     if n % 2:
    ...         return Err(ValueError("odd"))
    ...     return Ok(n // 2)
    >>> match halve(10):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error)
    5

Tags:
    result-pattern, error-handling, dts

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Examples:
        >>> Ok(10).unwrap()
        10
        >>> Ok(42).is_err()
        False
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``unwrap`` raises the wrapped error.

    Examples:
        >>> Err(ValueError("something went wrong")).is_err()
        True
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]


__all__ = [
    "Ok",
    "Err",
    "Result",
]
