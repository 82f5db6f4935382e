"""Tests for field validation rules."""

import pytest
from datetime import date
from decimal import Decimal

from ledger.exceptions import EmptyUsername, InvalidAmount, InvalidDate, InvalidText, LedgerError
from ledger.validation import (
    validate_amount,
    validate_entry_date,
    validate_text,
    validate_username,
)


class TestValidateAmount:
    """Tests for validate_amount."""

    @pytest.mark.parametrize("value, expected", [
        (Decimal("12.34"), Decimal("12.34")),
        (0, Decimal("0")),
        (15, Decimal("15")),
        (2.5, Decimal("2.5")),
        (" 99.90 ", Decimal("99.90")),
    ])
    def test_accepts_non_negative_numbers(self, value, expected):
        """Test accepted amount inputs."""
        assert validate_amount(value) == expected

    @pytest.mark.parametrize("value", [
        -1,
        Decimal("-0.01"),
        "-5",
        "abc",
        "",
        "NaN",
        "Infinity",
        float("inf"),
        True,
        None,
        [1],
    ])
    def test_rejects_everything_else(self, value):
        """Test rejected amount inputs."""
        with pytest.raises(InvalidAmount):
            validate_amount(value)

    def test_error_message_is_readable(self):
        """Test that the error explains itself."""
        with pytest.raises(InvalidAmount, match="non-negative"):
            validate_amount(-5)

    def test_errors_are_not_value_errors(self):
        """Test that taxonomy errors are LedgerErrors, not ValueErrors."""
        with pytest.raises(LedgerError):
            validate_amount(-5)
        assert not issubclass(InvalidAmount, ValueError)


class TestValidateEntryDate:
    """Tests for validate_entry_date."""

    def test_accepts_date(self):
        """Test that a date passes through."""
        assert validate_entry_date(date(2024, 3, 5)) == date(2024, 3, 5)

    def test_accepts_iso_string(self):
        """Test that yyyy-mm-dd strings are parsed."""
        assert validate_entry_date("2024-03-05") == date(2024, 3, 5)

    def test_accepts_leap_day(self):
        """Test a valid leap day."""
        assert validate_entry_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", [
        "2023-02-29",
        "2024-13-01",
        "2024-3-5",
        "20240305",
        "05-03-2024",
        "",
        None,
        20240305,
    ])
    def test_rejects_invalid(self, value):
        """Test rejected date inputs."""
        with pytest.raises(InvalidDate):
            validate_entry_date(value)


class TestValidateUsername:
    """Tests for validate_username."""

    def test_strips(self):
        """Test surrounding whitespace is removed."""
        assert validate_username("  alice ") == "alice"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_rejects_blank(self, value):
        """Test blank usernames are rejected."""
        with pytest.raises(EmptyUsername):
            validate_username(value)


class TestValidateText:
    """Tests for validate_text."""

    def test_strips(self):
        """Test surrounding whitespace is removed."""
        assert validate_text("  Rent ", "category", 200) == "Rent"

    def test_length_limit_applies_after_stripping(self):
        """Test padding does not count towards the limit."""
        assert validate_text(" " + "x" * 10 + " ", "category", 10) == "x" * 10

    def test_rejects_too_long(self):
        """Test over-long text names the field and the limit."""
        with pytest.raises(InvalidText) as exc_info:
            validate_text("x" * 201, "category", 200)
        assert str(exc_info.value) == "Invalid category: must be at most 200 characters"

    @pytest.mark.parametrize("value", [None, 5, Decimal("5"), ["Rent"]])
    def test_rejects_non_text(self, value):
        """Test non-string values are rejected with a ledger error."""
        with pytest.raises(InvalidText):
            validate_text(value, "frequency", 50)
        assert issubclass(InvalidText, LedgerError)
