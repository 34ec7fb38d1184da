"""Tests for the scorecard service orchestration."""

import pytest

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import CHART_DISPLAY_CATALOGUE, RagStatus
from scorecard_engine.scoring.models import FinancialFigures
from scorecard_engine.scoring.options import (
    Leadership,
    MarketDemand,
    SalesExecution,
)
from scorecard_engine.scoring.service import ScorecardService


class TestRecordToInput:
    def test_maps_stored_values(self, make_record):
        scorecard = ScorecardService.record_to_input(make_record(revenue_variance=12.5))

        assert scorecard.revenue_variance == 12.5
        assert scorecard.leadership == Leadership.MINOR
        assert scorecard.sales_execution == SalesExecution.ON_TARGET

    def test_malformed_values_become_not_applicable(self, make_record, caplog):
        record = make_record(
            revenue_variance="n/a",
            market_demand="booming",
            leadership="na",
        )

        with caplog.at_level("WARNING"):
            scorecard = ScorecardService.record_to_input(record)

        assert scorecard.revenue_variance is None
        assert scorecard.market_demand is None
        assert scorecard.leadership == Leadership.NOT_APPLICABLE
        assert "booming" in caplog.text

    def test_malformed_field_does_not_block_scoring(self, make_record):
        record = make_record(revenue_variance="???", market_demand="booming")

        result = ScorecardService.score(ScorecardService.record_to_input(record))

        sections = result.section_subtotals
        assert sections["financial"].max_score == 30
        assert sections["market"].max_score == 7.5


class TestFiguresToInput:
    def test_scores_submission(self):
        figures = FinancialFigures(
            revenue_actual=110_000,
            revenue_target=100_000,
            gross_profit_actual=50_000,
            gross_profit_target=50_000,
            overheads_actual=18_000,
            overheads_budget=20_000,
            net_profit_actual=30_000,
            net_profit_target=25_000,
            total_wages=20_000,
            productivity_benchmark=2.0,
        )
        scorecard = ScorecardService.figures_to_input(
            figures,
            leadership=Leadership.ALIGNED,
            market_demand=MarketDemand.STRONG,
        )

        result = ScorecardService.score(scorecard)

        # revenue 10 + gp 6 + overheads 10 + net 10 + productivity 10 (2.5 vs 2.0)
        assert result.section_subtotals["financial"].score == 36
        assert result.section_subtotals["people"].score == 20
        assert result.section_subtotals["market"].score == 7.5
        assert result.total_score == 64


class TestSectionScores:
    def test_chart_catalogue(self, make_record):
        sections = ScorecardService.section_scores(make_record(), CHART_DISPLAY_CATALOGUE)

        assert sections["financial"].max_score == 20
        assert sections["people"].max_score == 10


class TestBusinessSummaries:
    def test_latest_record_and_trend(self, make_record):
        records = [
            make_record("beta", "2026-02", 72, business_name="Beta Builders"),
            make_record("beta", "2026-03", 60, business_name="Beta Builders", biggest_risk="Cash"),
            make_record("alpha", "2026-03", 80, business_name="Alpha Agency"),
        ]

        summaries, latest = ScorecardService.build_business_summaries(records)

        assert [s.business_name for s in summaries] == ["Alpha Agency", "Beta Builders"]
        beta = summaries[1]
        assert beta.latest_score == 60
        assert beta.rag_status == RagStatus.AMBER
        assert beta.trend.change == -12
        assert beta.is_anomaly
        assert beta.top_risk == "Cash"
        assert summaries[0].trend is None
        assert latest["beta"].month == "2026-03"

    def test_rag_is_derived_from_stored_total(self, make_record, caplog):
        record = make_record(total_score=80, rag_status="red")

        with caplog.at_level("WARNING"):
            summaries, _ = ScorecardService.build_business_summaries([record])

        assert summaries[0].rag_status == RagStatus.GREEN
        assert "does not match" in caplog.text

    def test_tied_latest_month_raises(self, make_record):
        records = [make_record(month="2026-03"), make_record(month="2026-03")]

        with pytest.raises(ScorecardIntegrityError):
            ScorecardService.build_business_summaries(records)

    def test_empty(self):
        assert ScorecardService.build_business_summaries([]) == ([], {})


class TestPortfolioAggregate:
    def test_aggregate_from_records(self, make_record):
        records = [
            make_record("alpha", "2026-03", 62),
            make_record("beta", "2026-02", 72),
            make_record("beta", "2026-03", 60),
        ]

        aggregate = ScorecardService.build_portfolio_aggregate(records)

        assert aggregate.total_businesses == 2
        assert aggregate.analysis_month == "2026-03"
        assert len(aggregate.anomalies) == 1
        assert len(aggregate.weakest_sections) == 6

    def test_limit_keeps_lowest_scores(self, make_record):
        records = [make_record(f"biz-{i}", "2026-03", 50 + i) for i in range(5)]

        aggregate = ScorecardService.build_portfolio_aggregate(records, limit=3)

        assert aggregate.total_businesses == 3
        assert sorted(b.score for b in aggregate.businesses) == [50, 51, 52]


class TestCapSummaries:
    def test_under_limit_is_unchanged(self, make_record):
        summaries, _ = ScorecardService.build_business_summaries([make_record()])
        assert ScorecardService.cap_summaries(summaries, 20) == summaries

    def test_keeps_input_order(self, make_record):
        records = [
            make_record("a", total_score=90),
            make_record("b", total_score=40),
            make_record("c", total_score=70),
            make_record("d", total_score=55),
        ]
        summaries, _ = ScorecardService.build_business_summaries(records)

        capped = ScorecardService.cap_summaries(summaries, 2)

        assert [s.business_id for s in capped] == ["b", "d"]

    def test_negative_limit_raises(self):
        with pytest.raises(ValueError):
            ScorecardService.cap_summaries([], -1)
