"""Tests for the SQLAlchemy ORM layer (base, tables, session)."""

from __future__ import annotations

import datetime

import pytest
from sqlalchemy import Boolean, Date, Integer, JSON, Text, inspect, select, text
from sqlalchemy.exc import IntegrityError

from dts.core.orm import (
    AffectedTable,
    DeathsTable,
    DisasterRecordTable,
    DtsBase,
    DtsSession,
    HumanCategoryPresenceTable,
    HumanDsgConfigTable,
    HumanDsgTable,
    create_dts_engine,
    dts_session_factory,
    transaction,
)


# =========================================================================
# DtsBase: type_annotation_map
# =========================================================================


class TestDtsBase:
    def test_type_annotation_map(self):
        m = DtsBase.type_annotation_map
        assert m[str] is Text
        assert m[int] is Integer
        assert m[bool] is Boolean
        assert m[datetime.date] is Date
        assert m[dict] is JSON

    def test_all_tables_registered(self):
        assert set(DtsBase.metadata.tables) == {
            "disaster_records",
            "human_dsg",
            "deaths",
            "injured",
            "missing",
            "affected",
            "displaced",
            "displacement_stocks",
            "human_category_presence",
            "human_dsg_config",
        }


# =========================================================================
# Schema
# =========================================================================


class TestSchema:
    def test_create_all(self, engine):
        names = set(inspect(engine).get_table_names())
        assert {"human_dsg", "deaths", "human_category_presence"} <= names

    def test_effect_tables_reference_dsg(self):
        for table in (DeathsTable.__table__, AffectedTable.__table__):
            fks = list(table.c.dsg_id.foreign_keys)
            assert fks[0].column.table.name == "human_dsg"

    def test_presence_record_unique(self):
        assert HumanCategoryPresenceTable.__table__.c.record_id.unique

    def test_config_id_autoincrement(self, session):
        session.add(HumanDsgConfigTable(hidden={"cols": []}))
        session.commit()
        assert session.scalar(select(HumanDsgConfigTable.id)) == 1


# =========================================================================
# Engine / session
# =========================================================================


class TestEngine:
    def test_sqlite_foreign_keys_enabled(self, engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_foreign_key_enforced(self, session):
        session.add(HumanDsgTable(id="d1", record_id="missing-record"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_cascade_from_record(self, session, record_id):
        session.add(HumanDsgTable(id="d1", record_id=record_id))
        session.flush()
        session.add(DeathsTable(id="x1", dsg_id="d1", deaths=3))
        session.commit()
        session.execute(DisasterRecordTable.__table__.delete())
        session.commit()
        assert session.scalar(select(DeathsTable.id)) is None


class TestSession:
    def test_expire_on_commit_disabled(self, engine):
        factory = dts_session_factory(engine)
        with factory() as sess:
            assert isinstance(sess, DtsSession)
            rec = DisasterRecordTable(id="r", country_accounts_id="c")
            sess.add(rec)
            sess.commit()
            assert "country_accounts_id" in rec.__dict__

    def test_transaction_commits(self, session):
        with transaction(session):
            session.add(DisasterRecordTable(id="r1"))
        assert not session.in_transaction()
        assert session.scalar(select(DisasterRecordTable.id)) == "r1"

    def test_transaction_rolls_back(self, session):
        with pytest.raises(RuntimeError):
            with transaction(session):
                session.add(DisasterRecordTable(id="r1"))
                session.flush()
                raise RuntimeError("boom")
        assert session.scalar(select(DisasterRecordTable.id)) is None

    def test_nested_transaction_uses_savepoint(self, session):
        session.add(DisasterRecordTable(id="outer"))
        session.flush()
        with pytest.raises(RuntimeError):
            with transaction(session):
                session.add(DisasterRecordTable(id="inner"))
                session.flush()
                raise RuntimeError("boom")
        session.commit()
        assert session.scalars(select(DisasterRecordTable.id)).all() == ["outer"]

    def test_file_engine(self, tmp_path):
        eng = create_dts_engine(f"sqlite:///{tmp_path / 'x.db'}")
        DtsBase.metadata.create_all(eng)
        assert "deaths" in inspect(eng).get_table_names()
        eng.dispose()
