"""Tests for section aggregation."""

from dataclasses import replace

import pytest

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import (
    CHART_DISPLAY_CATALOGUE,
    FULL_CATALOGUE,
    CatalogueVariant,
    MetricId,
)
from scorecard_engine.scoring.metric_scorer import MetricScorer
from scorecard_engine.scoring.models import MetricScore
from scorecard_engine.scoring.options import Leadership
from scorecard_engine.scoring.section_aggregator import SectionAggregator


class TestAggregateSection:
    def test_sums_applicable_metrics(self):
        result = SectionAggregator.aggregate_section([
            MetricScore(MetricId.REVENUE, 8, 10),
            MetricScore(MetricId.GROSS_PROFIT, 6, 10),
            MetricScore(MetricId.OVERHEADS, 0, 10, is_applicable=False),
        ])

        assert result.score == 14
        assert result.max_score == 20
        assert result.percent == pytest.approx(70.0)

    def test_all_excluded_is_no_data(self):
        result = SectionAggregator.aggregate_section([
            MetricScore(MetricId.REVENUE, 0, 10, is_applicable=False),
            MetricScore(MetricId.GROSS_PROFIT, 0, 10, is_applicable=False),
        ])

        assert result.score == 0
        assert result.max_score == 0
        assert not result.has_data
        assert result.percent is None

    def test_scored_zero_is_distinguishable_from_no_data(self):
        result = SectionAggregator.aggregate_section([
            MetricScore(MetricId.REVENUE, 0, 10),
            MetricScore(MetricId.GROSS_PROFIT, 0, 10),
        ])

        assert result.max_score == 20
        assert result.has_data
        assert result.percent == 0.0

    def test_metric_above_max_raises(self):
        with pytest.raises(ScorecardIntegrityError):
            SectionAggregator.aggregate_section([MetricScore(MetricId.REVENUE, 11, 10)])

    def test_negative_metric_raises(self):
        with pytest.raises(ScorecardIntegrityError, match="negative"):
            SectionAggregator.aggregate_section([MetricScore(MetricId.REVENUE, -5, 10)])

    def test_nonzero_score_with_zero_max_raises(self):
        with pytest.raises(ScorecardIntegrityError):
            SectionAggregator.aggregate_section([MetricScore(MetricId.REVENUE, -1, 0)])

    def test_records_catalogue_variant(self):
        result = SectionAggregator.aggregate_section([], CatalogueVariant.CHART_DISPLAY)
        assert result.catalogue == CatalogueVariant.CHART_DISPLAY


class TestAggregateSections:
    def test_full_catalogue_at_max(self, max_scorecard):
        sections = SectionAggregator.aggregate_sections(MetricScorer.score_metrics(max_scorecard))

        assert list(sections) == ["financial", "people", "market", "product", "suppliers", "sales"]
        assert {k: s.score for k, s in sections.items()} == {
            "financial": 40,
            "people": 20,
            "market": 15,
            "product": 10,
            "suppliers": 5,
            "sales": 10,
        }

    def test_not_applicable_leadership_shrinks_people_max(self, max_scorecard):
        scorecard = replace(max_scorecard, leadership=Leadership.NOT_APPLICABLE)
        sections = SectionAggregator.aggregate_sections(MetricScorer.score_metrics(scorecard))

        assert sections["people"].score == 10
        assert sections["people"].max_score == 10

    def test_chart_catalogue_only_counts_its_metrics(self, max_scorecard):
        sections = SectionAggregator.aggregate_sections(
            MetricScorer.score_metrics(max_scorecard), CHART_DISPLAY_CATALOGUE
        )

        assert sections["financial"].max_score == 20
        assert sections["people"].max_score == 10
        assert sum(s.score for s in sections.values()) == 70
        assert all(s.catalogue == CatalogueVariant.CHART_DISPLAY for s in sections.values())


class TestCatalogues:
    def test_full_catalogue_budgets(self):
        budgets = {s.key: s.max_score for s in FULL_CATALOGUE.sections}
        assert budgets == {
            "financial": 40,
            "people": 20,
            "market": 15,
            "product": 10,
            "suppliers": 5,
            "sales": 10,
        }
        assert FULL_CATALOGUE.max_total == 100

    def test_chart_catalogue_budgets(self):
        budgets = {s.key: s.max_score for s in CHART_DISPLAY_CATALOGUE.sections}
        assert budgets == {
            "financial": 20,
            "people": 10,
            "market": 15,
            "product": 10,
            "suppliers": 5,
            "sales": 10,
        }
        assert CHART_DISPLAY_CATALOGUE.max_total == 70

    def test_catalogues_share_section_keys(self):
        assert FULL_CATALOGUE.section_keys == CHART_DISPLAY_CATALOGUE.section_keys
