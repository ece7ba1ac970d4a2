"""
Core primitives: errors, results, logging, settings and the ORM layer.

Usage:
    from dts.core.result import Ok, Err, Result
    from dts.core.errors import HumanEffectsError, HEErrorCode
    from dts.core.logging import get_logger
"""

from dts.core.errors import (
    DtsError,
    HEErrorCode,
    HumanEffectsError,
    RowErrors,
)
from dts.core.result import Err, Ok, Result

__all__ = [
    "DtsError",
    "HEErrorCode",
    "HumanEffectsError",
    "RowErrors",
    "Ok",
    "Err",
    "Result",
]
