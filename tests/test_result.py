"""Tests for the Result type."""
import pytest

from app.result import NOT_FOUND, STORE_ERROR, Result


def test_ok_result():
    result = Result.ok(42)
    assert result
    assert result.success
    assert result.value == 42
    assert result.error is None
    assert result.unwrap() == 42


def test_failed_result():
    result = Result.fail("Member not found", code=NOT_FOUND)
    assert not result
    assert result.error == "Member not found"
    assert result.error_code == NOT_FOUND
    with pytest.raises(ValueError, match="Member not found"):
        result.unwrap()


def test_fail_defaults_to_store_error_and_can_carry_partial_value():
    result = Result.fail("boom", value={"reassigned_count": 1})
    assert result.error_code == STORE_ERROR
    assert result.value == {"reassigned_count": 1}
