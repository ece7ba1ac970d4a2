"""Tests for effect tables and field definition catalogs."""

import pytest

from dts.core.errors import UnknownEffectTableError
from dts.human_effects.config import CustomDimension
from dts.human_effects.definitions import (
    FieldDefinition,
    FieldFormat,
    FieldRole,
    custom_definitions,
    shared_db_names,
    shared_definitions,
    shared_definitions_all,
    table_definitions,
)
from dts.human_effects.tables import EffectTable, effect_table_from_string


class TestEffectTable:
    def test_six_kinds(self):
        assert [t.value for t in EffectTable] == [
            "Deaths", "Injured", "Missing", "Affected", "Displaced", "DisplacementStocks",
        ]

    @pytest.mark.parametrize("value", ["DisplacementStocks", "displacement_stocks"])
    def test_from_string(self, value):
        assert effect_table_from_string(value) is EffectTable.DISPLACEMENT_STOCKS

    def test_from_string_unknown_raises(self):
        with pytest.raises(UnknownEffectTableError, match="Invalid table type: Bogus"):
            effect_table_from_string("Bogus")

    def test_from_string_non_string_raises(self):
        with pytest.raises(UnknownEffectTableError):
            effect_table_from_string(3)

    def test_schema(self):
        schema = EffectTable.AFFECTED.schema
        assert schema.table.name == "affected"
        assert schema.presence_prefix == "affected"
        assert schema.total_group_column == "affected_total_group_flags"
        assert EffectTable.DEATHS.schema.presence_prefix == ""


class TestFieldDefinition:
    def test_shared_and_custom_forbidden(self):
        with pytest.raises(ValueError):
            FieldDefinition("X", "x", "x", FieldFormat.ENUM, FieldRole.DIMENSION, shared=True, custom=True)

    def test_enum_values_only_for_enum(self):
        options = FieldDefinition.enum("E", "e", [("a", "A")]).enum_values
        with pytest.raises(ValueError):
            FieldDefinition("N", "n", "n", FieldFormat.NUMBER, FieldRole.METRIC, enum_values=options)

    def test_frozen(self):
        d = FieldDefinition.number("N", "n")
        with pytest.raises(AttributeError):
            d.db_name = "other"

    def test_factories(self):
        d = FieldDefinition.date("As of", "as_of", js_name="asOf")
        assert d.format is FieldFormat.DATE
        assert d.is_dimension
        assert FieldDefinition.number("N", "n").is_metric


class TestSharedCatalog:
    def test_order_and_flags(self):
        defs = shared_definitions_all()
        assert [d.db_name for d in defs] == [
            "sex", "age", "disability", "global_poverty_line", "national_poverty_line",
        ]
        assert all(d.shared and d.format is FieldFormat.ENUM and d.is_dimension for d in defs)

    def test_enum_keys(self):
        by_name = {d.db_name: d for d in shared_definitions_all()}
        assert [o.key for o in by_name["sex"].enum_values] == ["m", "f", "o"]
        assert [o.key for o in by_name["age"].enum_values] == ["0-14", "15-64", "65+"]
        assert len(by_name["disability"].enum_values) == 16
        assert by_name["global_poverty_line"].enum_keys == {"below", "above"}

    def test_hidden_filter_keeps_order(self):
        defs = shared_definitions({"age", "disability"})
        assert [d.db_name for d in defs] == ["sex", "global_poverty_line", "national_poverty_line"]

    def test_fresh_lists(self):
        a = shared_definitions_all()
        a.clear()
        assert len(shared_definitions_all()) == 5

    def test_shared_db_names(self):
        assert "sex" in shared_db_names()


class TestCustomDefinitions:
    def test_from_config(self):
        dims = [CustomDimension(uiName="Ethnicity", dbName="eth", enum=[{"key": "a", "label": "A"}])]
        (d,) = custom_definitions(dims)
        assert d.custom and not d.shared
        assert d.js_name == d.db_name == "eth"
        assert d.format is FieldFormat.ENUM and d.is_dimension
        assert d.enum_keys == {"a"}


class TestTableDefinitions:
    @pytest.mark.parametrize(
        ("table", "expected"),
        [
            ("Deaths", ["deaths"]),
            ("Injured", ["injured"]),
            ("Missing", ["as_of", "missing"]),
            ("Affected", ["direct", "indirect"]),
            ("Displaced", ["assisted", "timing", "as_of", "short", "medium_short",
                           "medium_long", "long", "permanent"]),
            ("DisplacementStocks", ["assisted", "as_of", "displacement_stocks"]),
        ],
    )
    def test_columns(self, table, expected):
        assert [d.db_name for d in table_definitions(table)] == expected

    def test_roles(self):
        defs = {d.db_name: d for d in table_definitions(EffectTable.DISPLACED)}
        assert defs["timing"].enum_keys == {"pre-emptive", "reactive"}
        assert defs["assisted"].is_dimension
        assert defs["as_of"].format is FieldFormat.DATE
        assert defs["permanent"].is_metric

    def test_unknown_table(self):
        with pytest.raises(UnknownEffectTableError):
            table_definitions("Nope")
