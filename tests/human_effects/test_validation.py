"""Tests for dts.human_effects.validation."""

import datetime

import pytest

from dts.core.errors import HEErrorCode, HumanEffectsError, UnknownFieldFormatError
from dts.human_effects.definitions import FieldDefinition, FieldRole, table_definitions
from dts.human_effects.validation import UNSET, parse_date, positional_row, validate_row


@pytest.fixture
def missing_defs(sex_def):
    return [sex_def, *table_definitions("Missing")]


def _error(result) -> HumanEffectsError:
    assert result.is_err()
    return result.error


class TestUnset:
    def test_singleton_and_falsy(self):
        assert UNSET is type(UNSET)()
        assert not UNSET
        assert repr(UNSET) == "UNSET"


class TestPositionalRow:
    def test_mapping_by_js_name(self, missing_defs):
        row = positional_row(missing_defs, {"sex": "m", "missing": 3})
        assert row == ["m", UNSET, 3]

    def test_short_sequence_padded(self, missing_defs):
        assert positional_row(missing_defs, ["m"]) == ["m", UNSET, UNSET]


class TestTriState:
    def test_unset_rejected_without_partial(self, injured_defs):
        err = _error(validate_row(injured_defs, ["m"]))
        assert err.code is HEErrorCode.INVALID_VALUE
        assert err.message == "Undefined value in row"

    def test_unset_kept_with_partial(self, injured_defs):
        assert validate_row(injured_defs, [UNSET, 4], allow_partial=True).unwrap() == [UNSET, 4]

    def test_none_passes(self, injured_defs):
        assert validate_row(injured_defs, [None, None]).unwrap() == [None, None]

    def test_empty_string_is_none_in_string_mode(self, injured_defs):
        assert validate_row(injured_defs, ["", ""], string_mode=True).unwrap() == [None, None]

    def test_empty_string_is_invalid_in_native_mode(self, injured_defs):
        err = _error(validate_row(injured_defs, ["", 1]))
        assert 'Invalid enum value ""' in err.message

    def test_too_many_values(self, injured_defs):
        err = _error(validate_row(injured_defs, ["m", 1, 2]))
        assert err.code is HEErrorCode.OTHER


class TestEnum:
    def test_valid(self, injured_defs):
        assert validate_row(injured_defs, ["f", 1]).unwrap() == ["f", 1]

    def test_case_sensitive(self, injured_defs):
        err = _error(validate_row(injured_defs, ["M", 1]))
        assert err.code is HEErrorCode.INVALID_VALUE
        assert err.message == 'Invalid enum value "M" for field "sex"'

    def test_non_string_rejected(self, injured_defs):
        assert validate_row(injured_defs, [1, 1]).is_err()


class TestNumber:
    @pytest.mark.parametrize(("raw", "expected"), [("3", 3), (" 2.5 ", 2.5), ("4.0", 4), ("-1", -1)])
    def test_string_mode(self, injured_defs, raw, expected):
        value = validate_row(injured_defs, ["m", raw], string_mode=True).unwrap()[1]
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize("raw", ["abc", "nan", "inf", "1,5"])
    def test_string_mode_invalid(self, injured_defs, raw):
        err = _error(validate_row(injured_defs, ["m", raw], string_mode=True))
        assert err.message == f'Invalid number string "{raw}" for field "injured"'

    def test_native(self, injured_defs):
        assert validate_row(injured_defs, ["m", 7]).unwrap() == ["m", 7]
        assert validate_row(injured_defs, ["m", 7.0]).unwrap()[1] == 7

    @pytest.mark.parametrize("raw", ["7", True, float("nan"), [1]])
    def test_native_invalid(self, injured_defs, raw):
        err = _error(validate_row(injured_defs, ["m", raw]))
        assert err.code is HEErrorCode.INVALID_VALUE
        assert err.message.startswith("Invalid number value")

    def test_string_vs_native_equivalent(self, injured_defs):
        native = validate_row(injured_defs, ["f", 12]).unwrap()
        strings = validate_row(injured_defs, ["f", "12"], string_mode=True).unwrap()
        assert native == strings


class TestDate:
    def test_iso_string(self, missing_defs):
        row = validate_row(missing_defs, ["m", "2024-03-01", 1]).unwrap()
        assert row[1] == datetime.date(2024, 3, 1)

    def test_datetime_string_truncated(self, missing_defs):
        row = validate_row(missing_defs, ["m", "2024-03-01T10:20:00", 1]).unwrap()
        assert row[1] == datetime.date(2024, 3, 1)

    def test_date_instances(self, missing_defs):
        d = datetime.date(2023, 1, 2)
        assert validate_row(missing_defs, ["m", d, 1]).unwrap()[1] == d
        dt = datetime.datetime(2023, 1, 2, 5, 6)
        assert validate_row(missing_defs, ["m", dt, 1]).unwrap()[1] == d

    def test_not_a_string(self, missing_defs):
        err = _error(validate_row(missing_defs, ["m", 20240301, 1]))
        assert err.message.startswith("Invalid date type, not a string")

    def test_bad_format(self, missing_defs):
        err = _error(validate_row(missing_defs, ["m", "not a date", 1]))
        assert err.message == 'Invalid date format "not a date" for field "asOf"'

    @pytest.mark.parametrize("raw", ["5", "March 5", "10:30"])
    def test_partial_date_rejected(self, missing_defs, raw):
        err = _error(validate_row(missing_defs, ["m", raw, 1]))
        assert err.message == f'Invalid date format "{raw}" for field "asOf"'

    def test_parse_date_blank(self):
        assert parse_date("  ") is None
        assert parse_date(" 2024-03-01 ") == datetime.date(2024, 3, 1)


class TestFailFast:
    def test_first_error_reported(self, missing_defs):
        err = _error(validate_row(missing_defs, ["x", "bad", "bad"], string_mode=True))
        assert 'field "sex"' in err.message


class TestUnknownFormat:
    def test_raises(self):
        d = FieldDefinition("Odd", "odd", "odd", "weird", FieldRole.DIMENSION)
        with pytest.raises(UnknownFieldFormatError):
            validate_row([d], ["x"])
