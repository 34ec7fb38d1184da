"""Tests for categorical options and numeric input handling."""

import math

import pytest

from scorecard_engine.scoring.options import (
    LEADERSHIP_SCORES,
    SALES_SCORES,
    Leadership,
    SalesExecution,
    option_label,
    option_points,
    parse_option,
)
from scorecard_engine.scoring.utils import clamp, round_half_up, safe_divide, safe_float


class TestParseOption:
    def test_valid_string(self):
        assert parse_option(SalesExecution, "onTarget") == SalesExecution.ON_TARGET

    def test_enum_member_passes_through(self):
        assert parse_option(Leadership, Leadership.TOXIC) is Leadership.TOXIC

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_is_unspecified(self, value):
        assert parse_option(Leadership, value) is None

    def test_unknown_value_logs_and_returns_none(self, caplog):
        with caplog.at_level("WARNING"):
            assert parse_option(Leadership, "excellent", "leadership") is None
        assert "Invalid leadership value 'excellent'" in caplog.text

    def test_wrong_case_is_unknown(self):
        assert parse_option(SalesExecution, "ontarget") is None


class TestOptionPoints:
    def test_points(self):
        assert option_points(SALES_SCORES, SalesExecution.ON_TARGET) == 6

    def test_not_applicable_has_no_points(self):
        assert option_points(LEADERSHIP_SCORES, Leadership.NOT_APPLICABLE) is None

    def test_labels(self):
        assert option_label(None) == "Not rated"
        assert option_label(Leadership.ALIGNED) == "Fully aligned, accountable leadership"


class TestSafeFloat:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (4.5, 4.5),
            (3, 3.0),
            ("1,234.5", 1234.5),
            ("-12%", -12.0),
            (" 7 ", 7.0),
        ],
    )
    def test_converts(self, value, expected):
        assert safe_float(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        assert safe_float(value) is None

    @pytest.mark.parametrize("value", ["abc", True, math.nan, "nan", object()])
    def test_malformed_is_not_applicable(self, value, caplog):
        with caplog.at_level("WARNING"):
            assert safe_float(value, "revenue_variance") is None
        assert "revenue_variance" in caplog.text


class TestNumericHelpers:
    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (74.5, 75), (74.4, 74), (62.0, 62)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_safe_divide(self):
        assert safe_divide(10, 4) == 2.5
        assert safe_divide(10, 0) == 0.0
        assert safe_divide(10, 0, default=-1) == -1

    def test_clamp(self):
        assert clamp(150, -100, 100) == 100
        assert clamp(-150, -100, 100) == -100
        assert clamp(5, -100, 100) == 5
