"""
Operations layer: transaction-scoped business entry points.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` instead of raising domain errors
- All functions are transport-agnostic (no HTTP, no CLI knowledge)

Usage::

    from dts.ops import OperationContext
    from dts.ops.human_effects import load_effects

    ctx = OperationContext(session=session)
    result = load_effects(ctx, record_id, "Injured")
    assert result.success
"""

from dts.ops.context import OperationContext
from dts.ops.result import OperationError, OperationResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
]
