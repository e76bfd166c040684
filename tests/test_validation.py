"""Tests for argument validation helpers."""

import pytest

from foodinflation.common.exceptions import InvalidFieldError, ValidationError
from foodinflation.common.validation import (
    validate_choice,
    validate_direction,
    validate_field,
    validate_fields,
    validate_month,
    validate_positive,
    validate_range,
)

ALLOWED = ("country", "year", "month")


class TestFieldValidation:

    def test_valid_field(self):
        assert validate_field("year", ALLOWED) == "year"

    def test_invalid_field(self):
        with pytest.raises(InvalidFieldError):
            validate_field("continent", ALLOWED)

    def test_single_string_becomes_tuple(self):
        assert validate_fields("country", ALLOWED) == ("country",)

    def test_sequence(self):
        assert validate_fields(["country", "year"], ALLOWED) == ("country", "year")

    def test_empty_sequence(self):
        with pytest.raises(ValidationError):
            validate_fields([], ALLOWED)


class TestNumericValidation:

    def test_positive(self):
        assert validate_positive(3) == 3
        with pytest.raises(ValidationError, match="must be positive"):
            validate_positive(0, "n")

    def test_range(self):
        assert validate_range(5, 1, 10) == 5
        with pytest.raises(ValidationError):
            validate_range(0, 1, 10)
        with pytest.raises(ValidationError):
            validate_range(11, 1, 10)

    def test_open_range(self):
        assert validate_range(1000, 2) == 1000

    @pytest.mark.parametrize("month", [1, 6, 12])
    def test_month(self, month):
        assert validate_month(month) == month

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month):
        with pytest.raises(ValidationError):
            validate_month(month)


class TestChoiceValidation:

    def test_choice(self):
        assert validate_choice(">", (">", "<")) == ">"
        with pytest.raises(ValidationError, match="must be one of"):
            validate_choice("=>", (">", "<"), "comparator")

    def test_direction(self):
        assert validate_direction("desc") is True
        assert validate_direction("ASC") is False
        with pytest.raises(ValidationError):
            validate_direction("sideways")
