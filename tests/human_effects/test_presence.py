"""Tests for CategoryPresenceRepository and total-group flags."""

import pytest
from sqlalchemy import select, update

from dts.core.errors import UnsupportedFieldError
from dts.core.orm import HumanCategoryPresenceTable
from dts.human_effects.definitions import FieldDefinition, FieldFormat, FieldRole, table_definitions
from dts.human_effects.presence import (
    CategoryPresenceRepository,
    TotalGroupFlag,
    presence_column,
)
from dts.human_effects.tables import EffectTable


@pytest.fixture
def presence(session) -> CategoryPresenceRepository:
    return CategoryPresenceRepository(session)


class TestPresenceColumn:
    @pytest.mark.parametrize(
        ("table", "db_name", "expected"),
        [
            (EffectTable.DEATHS, "deaths", "deaths"),
            (EffectTable.AFFECTED, "direct", "affected_direct"),
            (EffectTable.DISPLACED, "medium_short", "displaced_medium_short"),
            (EffectTable.DISPLACEMENT_STOCKS, "displacement_stocks", "displacement_stocks"),
        ],
    )
    def test_naming(self, table, db_name, expected):
        d = FieldDefinition.number(db_name, db_name)
        assert presence_column(table.schema, d) == expected


class TestCategoryPresence:
    def test_no_row_is_empty(self, presence, record_id):
        assert presence.get(record_id, "Deaths", table_definitions("Deaths")) == {}

    def test_set_get(self, presence, record_id):
        defs = table_definitions("Affected")
        presence.set(record_id, "Affected", defs, {"direct": True, "indirect": False})
        assert presence.get(record_id, "Affected", defs) == {"direct": True, "indirect": False}

    def test_set_empty_clears(self, presence, record_id):
        defs = table_definitions("Injured")
        presence.set(record_id, "Injured", defs, {"injured": True})
        presence.set(record_id, "Injured", defs, {})
        assert presence.get(record_id, "Injured", defs) == {}

    def test_tables_share_one_row(self, presence, session, record_id):
        presence.set(record_id, "Deaths", table_definitions("Deaths"), {"deaths": True})
        presence.set(record_id, "Injured", table_definitions("Injured"), {"injured": False})
        rows = session.execute(select(HumanCategoryPresenceTable.id)).all()
        assert len(rows) == 1
        assert presence.get(record_id, "Deaths", table_definitions("Deaths")) == {"deaths": True}

    def test_js_names_used(self, presence, record_id):
        defs = table_definitions("Displaced")
        presence.set(record_id, "Displaced", defs, {"mediumShort": True})
        assert presence.get(record_id, "Displaced", defs) == {"mediumShort": True}

    def test_displacement_stocks(self, presence, record_id):
        defs = table_definitions("DisplacementStocks")
        presence.set(record_id, "DisplacementStocks", defs, {"displacementStocks": True})
        assert presence.get(record_id, "DisplacementStocks", defs) == {"displacementStocks": True}

    def test_dimensions_ignored(self, presence, record_id, injured_defs):
        presence.set(record_id, "Injured", injured_defs, {"sex": True, "injured": True})
        assert presence.get(record_id, "Injured", injured_defs) == {"injured": True}

    def test_custom_metric_rejected(self, presence, record_id):
        d = FieldDefinition("Extra", "extra", "extra", FieldFormat.NUMBER, FieldRole.METRIC, custom=True)
        with pytest.raises(UnsupportedFieldError, match="Custom metrics not supported"):
            presence.set(record_id, "Deaths", [d], {"extra": True})

    def test_tenant_filter(self, presence, record_id):
        defs = table_definitions("Deaths")
        presence.set(record_id, "Deaths", defs, {"deaths": True})
        assert presence.get(record_id, "Deaths", defs, "ca-1") == {"deaths": True}
        assert presence.get(record_id, "Deaths", defs, "ca-2") == {}

    def test_delete_all(self, presence, record_id):
        defs = table_definitions("Deaths")
        presence.set(record_id, "Deaths", defs, {"deaths": True})
        presence.delete_all(record_id)
        assert presence.get(record_id, "Deaths", defs) == {}


class TestTotalGroupFlags:
    def test_unset_is_none(self, presence, record_id):
        assert presence.total_group_get(record_id, "Deaths") is None

    def test_round_trip(self, presence, record_id):
        flags = [TotalGroupFlag("sex", True), {"dbName": "age", "isSet": False}]
        presence.total_group_set(record_id, "Deaths", flags)
        assert presence.total_group_get(record_id, "Deaths") == [
            TotalGroupFlag("sex", True),
            TotalGroupFlag("age", False),
        ]
        assert presence.total_group_get(record_id, "Injured") is None

    def test_empty_list_kept(self, presence, record_id):
        presence.total_group_set(record_id, "Missing", [])
        assert presence.total_group_get(record_id, "Missing") == []

    def test_none_clears(self, presence, record_id):
        presence.total_group_set(record_id, "Deaths", [TotalGroupFlag("sex", True)])
        presence.total_group_set(record_id, "Deaths", None)
        assert presence.total_group_get(record_id, "Deaths") is None

    def test_none_without_row_creates_nothing(self, presence, session, record_id):
        presence.total_group_set(record_id, "Deaths", None)
        assert session.execute(select(HumanCategoryPresenceTable.id)).first() is None

    def test_malformed_is_none(self, presence, session, record_id):
        presence.total_group_set(record_id, "Deaths", [])
        session.execute(
            update(HumanCategoryPresenceTable).values(
                deaths_total_group_flags=[{"dbName": 3, "isSet": "yes"}]
            )
        )
        assert presence.total_group_get(record_id, "Deaths") is None

    def test_from_json_rejects_bad_types(self):
        with pytest.raises(ValueError):
            TotalGroupFlag.from_json({"dbName": "sex", "isSet": 1})
        assert TotalGroupFlag("sex", True).to_json() == {"dbName": "sex", "isSet": True}
