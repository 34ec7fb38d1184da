"""Tests for role-based figure visibility."""

import pytest

from scorecard_engine.scoring.models import FinancialFigures
from scorecard_engine.scoring.visibility import (
    Role,
    can_see_financials,
    can_see_scores,
    parse_role,
    should_redact_figures,
    visible_figures,
)


class TestCanSeeFinancials:
    @pytest.mark.parametrize(
        "role,expected",
        [
            ("super_admin", True),
            ("business_user", True),
            ("consultant", False),
            (None, False),
            ("", False),
            ("admin", False),
            ("SUPER_ADMIN", False),
        ],
    )
    def test_role_table(self, role, expected):
        assert can_see_financials(role) is expected

    def test_accepts_role_enum(self):
        assert can_see_financials(Role.BUSINESS_USER)
        assert not can_see_financials(Role.CONSULTANT)


class TestCanSeeScores:
    @pytest.mark.parametrize(
        "role,expected",
        [
            ("super_admin", True),
            ("business_user", True),
            ("consultant", True),
            (None, False),
            ("", False),
            ("admin", False),
            ("SUPER_ADMIN", False),
        ],
    )
    def test_role_table(self, role, expected):
        assert can_see_scores(role) is expected


class TestRedaction:
    def test_consultant_figures_are_redacted(self):
        assert should_redact_figures("consultant")
        assert not should_redact_figures("super_admin")
        assert should_redact_figures(None)

    def test_visible_figures(self):
        figures = FinancialFigures(revenue_actual=120_000, revenue_target=100_000)

        assert visible_figures(figures, "business_user") is figures
        assert visible_figures(figures, "consultant") is None
        assert visible_figures(figures, "unknown") is None

    def test_decisions_are_not_cached(self):
        # Alternating roles must each get their own decision
        results = [can_see_financials(role) for role in ("consultant", "super_admin") * 3]
        assert results == [False, True] * 3


class TestParseRole:
    def test_exact_match(self):
        assert parse_role("consultant") == Role.CONSULTANT

    def test_case_sensitive(self):
        assert parse_role("Consultant") is None

    def test_unknown_role_logs_warning(self, caplog):
        with caplog.at_level("WARNING"):
            assert parse_role("admin") is None
        assert "Unrecognized viewer role" in caplog.text
