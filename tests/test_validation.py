"""Tests for count parsing."""

import pytest

from datagen_api.errors import InvalidParameter
from datagen_api.validation import MAX_COUNT, parse_count, parse_leading_int


class TestParseLeadingInt:

    def test_plain_number(self):
        assert parse_leading_int("42") == 42

    def test_sign_and_whitespace(self):
        assert parse_leading_int("  -7") == -7
        assert parse_leading_int("+3") == 3

    def test_trailing_characters_ignored(self):
        assert parse_leading_int("12abc") == 12
        assert parse_leading_int("1.9") == 1

    def test_only_ascii_digits(self):
        assert parse_leading_int("٣") is None
        assert parse_leading_int("５") is None
        assert parse_leading_int("4٣") == 4

    def test_no_leading_digits(self):
        assert parse_leading_int("abc") is None
        assert parse_leading_int("") is None
        assert parse_leading_int("-") is None


class TestParseCount:

    def test_absent_defaults_to_one(self):
        assert parse_count(None) == 1

    def test_within_bounds_returns_exact_value(self):
        assert parse_count("3") == 3
        assert parse_count(str(MAX_COUNT)) == MAX_COUNT

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidParameter, match="Must be a number"):
            parse_count("abc")

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(InvalidParameter, match="Must be a number"):
            parse_count("٣")

    def test_zero_rejected(self):
        with pytest.raises(InvalidParameter, match="Must be greater than 0"):
            parse_count("0")

    def test_negative_rejected(self):
        with pytest.raises(InvalidParameter, match="Must be greater than 0"):
            parse_count("-4")

    def test_above_default_max_cites_max(self):
        with pytest.raises(InvalidParameter, match="Maximum allowed count is 50"):
            parse_count("99")

    def test_endpoint_specific_max(self):
        assert parse_count("10", 10) == 10
        with pytest.raises(InvalidParameter, match="Maximum allowed count is 10"):
            parse_count("11", 10)

    def test_other_parameter_name_in_message(self):
        with pytest.raises(InvalidParameter, match="Invalid num parameter"):
            parse_count("x", 100, name="num")

    def test_error_is_bad_request(self):
        with pytest.raises(InvalidParameter) as exc_info:
            parse_count("0")
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_body()["error"] == "Bad Request"
