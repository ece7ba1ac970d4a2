"""Tests for dts.core.result module."""

import pytest

from dts.core.errors import HEErrorCode, HumanEffectsError
from dts.core.result import Err, Ok, Result


class TestOk:
    """Test Ok class."""

    def test_create_ok(self):
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap(self):
        assert Ok("hello").unwrap() == "hello"

    def test_repr(self):
        assert repr(Ok([1])) == "Ok([1])"


class TestErr:
    """Test Err class."""

    def test_flags(self):
        err = Err(ValueError("x"))
        assert err.is_err() is True
        assert err.is_ok() is False

    def test_unwrap_raises_wrapped_error(self):
        error = HumanEffectsError(HEErrorCode.OTHER, "missing")
        with pytest.raises(HumanEffectsError) as exc_info:
            Err(error).unwrap()
        assert exc_info.value is error


class TestPatternMatching:
    def test_match(self):
        def describe(r: Result[int]) -> str:
            match r:
                case Ok(value):
                    return f"ok:{value}"
                case Err(error):
                    return f"err:{error}"
            return "unreachable"

        assert describe(Ok(1)) == "ok:1"
        assert describe(Err(ValueError("x"))) == "err:x"
