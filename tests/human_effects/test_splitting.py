"""Tests for dts.human_effects.splitting."""

import pytest

from dts.human_effects.definitions import (
    FieldDefinition,
    shared_definitions_all,
    table_definitions,
)
from dts.human_effects.splitting import SplitRow, split_definitions


@pytest.fixture
def custom_def():
    return FieldDefinition.enum("Group", "grp", [("g1", "G1"), ("g2", "G2")], custom=True)


class TestSplitDefinitions:
    def test_groups_preserve_order(self, custom_def):
        defs = [*shared_definitions_all()[:2], custom_def, *table_definitions("Missing")]
        split = split_definitions(defs)
        assert [d.db_name for d in split.shared] == ["sex", "age"]
        assert [d.db_name for d in split.custom] == ["grp"]
        assert [d.db_name for d in split.not_shared] == ["as_of", "missing"]

    @pytest.mark.parametrize("table", ["Deaths", "Affected", "Displaced", "DisplacementStocks"])
    def test_partition_is_total(self, custom_def, table):
        defs = [*shared_definitions_all(), custom_def, *table_definitions(table)]
        split = split_definitions(defs)
        assert len(split.shared) + len(split.custom) + len(split.not_shared) == len(defs)


class TestSplitRow:
    def test_split_row(self, sex_def, custom_def):
        defs = [sex_def, custom_def, *table_definitions("Injured")]
        split = split_definitions(defs)
        assert split.split_row(["m", "g2", 5]) == SplitRow(["m"], {"grp": "g2"}, [5])

    def test_split_row_is_pure(self, sex_def):
        split = split_definitions([sex_def, *table_definitions("Injured")])
        values = ["f", 1]
        split.split_row(values)
        assert values == ["f", 1]
        assert split.split_row(values) == split.split_row(values)
