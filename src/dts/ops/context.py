"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument. The context carries the SQLAlchemy session, caller identity,
tenant and arbitrary metadata.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        session: SQLAlchemy session. Operations demarcate transactions on it.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request, ``"cli"`` or ``"sdk"``.
        user: Optional authenticated user identifier.
        country_accounts_id: Tenant the caller acts for. Reads are filtered
            by it when set.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    session: Session
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    user: str | None = None
    country_accounts_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
