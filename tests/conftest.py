"""
Shared pytest fixtures for dts tests.

This module provides:
- An in-memory SQLite engine with every table created
- A ``DtsSession`` bound to it
- Committed disaster records to hang effect rows on
- Settings cache cleanup for test isolation
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from dts.core.config import clear_settings_cache
from dts.core.orm import DisasterRecordTable, DtsBase, DtsSession, create_dts_engine
from dts.human_effects.definitions import FieldDefinition, table_definitions


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if test_path.parts and test_path.parts[0] == "cli":
            item.add_marker(pytest.mark.cli)
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "cli", "slow"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _clear_settings() -> Iterator[None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite engine with all tables created."""
    eng = create_dts_engine("sqlite:///:memory:")
    DtsBase.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[DtsSession]:
    """DtsSession bound to the in-memory engine."""
    with DtsSession(bind=engine) as sess:
        yield sess


@pytest.fixture
def record_id(session: DtsSession) -> str:
    """A committed disaster record owned by tenant ``ca-1``."""
    session.add(DisasterRecordTable(id="rec-1", country_accounts_id="ca-1"))
    session.commit()
    return "rec-1"


@pytest.fixture
def other_record_id(session: DtsSession) -> str:
    """A committed disaster record owned by tenant ``ca-2``."""
    session.add(DisasterRecordTable(id="rec-2", country_accounts_id="ca-2"))
    session.commit()
    return "rec-2"


@pytest.fixture
def sex_def() -> FieldDefinition:
    """Shared sex dimension restricted to ``m``/``f``."""
    return FieldDefinition.enum("Sex", "sex", [("m", "Male"), ("f", "Female")], shared=True)


@pytest.fixture
def injured_defs(sex_def: FieldDefinition) -> list[FieldDefinition]:
    """``[sex, injured]``."""
    return [sex_def, *table_definitions("Injured")]
