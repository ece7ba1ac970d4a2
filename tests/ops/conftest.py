"""Shared fixtures for dts.ops tests."""

import pytest

from dts.ops.context import OperationContext


@pytest.fixture()
def ctx(session) -> OperationContext:
    """Operation context bound to the in-memory test session."""
    return OperationContext(session=session, caller="test")
