"""
Scorecard Service
Orchestrates scoring of submissions and stored scorecards.

Stored records re-enter the engine here: numeric fields pass through
safe_float and categorical fields through parse_option, so malformed
stored data degrades to "not applicable" instead of failing the request.
"""

import logging
from collections import defaultdict
from typing import Optional, Sequence

from scorecard_engine.scoring.constants import FULL_CATALOGUE, SectionCatalogue
from scorecard_engine.scoring.metric_scorer import MetricScorer
from scorecard_engine.scoring.models import (
    BusinessSummary,
    FinancialFigures,
    PortfolioAggregate,
    ScorecardInput,
    ScorecardRecord,
    ScoreResult,
    SectionScore,
)
from scorecard_engine.scoring.options import (
    Leadership,
    MarketDemand,
    Marketing,
    ProductStrength,
    SalesExecution,
    SupplierStrength,
    parse_option,
)
from scorecard_engine.scoring.portfolio_aggregator import PortfolioAggregator
from scorecard_engine.scoring.score_engine import ScoreEngine
from scorecard_engine.scoring.section_aggregator import SectionAggregator
from scorecard_engine.scoring.trend_analyzer import TrendAnalyzer
from scorecard_engine.scoring.utils import safe_float
from scorecard_engine.scoring.variance import figures_to_variances

logger = logging.getLogger(__name__)


class ScorecardService:
    """
    Service for scoring scorecards and building portfolio summaries.

    Holds no state; every call recomputes from its arguments.
    """

    @staticmethod
    def record_to_input(record: ScorecardRecord) -> ScorecardInput:
        """
        Map a stored scorecard back into engine input.

        Args:
            record: Stored scorecard

        Returns:
            ScorecardInput with malformed fields treated as not applicable
        """
        return ScorecardInput(
            revenue_variance=safe_float(record.revenue_variance, "revenue_variance"),
            gross_profit_variance=safe_float(record.gross_profit_variance, "gross_profit_variance"),
            overheads_variance=safe_float(record.overheads_variance, "overheads_variance"),
            net_profit_variance=safe_float(record.net_profit_variance, "net_profit_variance"),
            productivity_benchmark=safe_float(record.productivity_benchmark, "productivity_benchmark"),
            productivity_actual=safe_float(record.productivity_actual, "productivity_actual"),
            leadership=parse_option(Leadership, record.leadership, "leadership"),
            market_demand=parse_option(MarketDemand, record.market_demand, "market_demand"),
            marketing=parse_option(Marketing, record.marketing, "marketing"),
            product_strength=parse_option(ProductStrength, record.product_strength, "product_strength"),
            supplier_strength=parse_option(SupplierStrength, record.supplier_strength, "supplier_strength"),
            sales_execution=parse_option(SalesExecution, record.sales_execution, "sales_execution"),
        )

    @staticmethod
    def figures_to_input(
        figures: FinancialFigures,
        leadership: Optional[Leadership] = None,
        market_demand: Optional[MarketDemand] = None,
        marketing: Optional[Marketing] = None,
        product_strength: Optional[ProductStrength] = None,
        supplier_strength: Optional[SupplierStrength] = None,
        sales_execution: Optional[SalesExecution] = None,
    ) -> ScorecardInput:
        """Build engine input from raw figures plus the qualitative ratings."""
        variances = figures_to_variances(figures)
        return ScorecardInput(
            **variances,
            leadership=leadership,
            market_demand=market_demand,
            marketing=marketing,
            product_strength=product_strength,
            supplier_strength=supplier_strength,
            sales_execution=sales_execution,
        )

    @staticmethod
    def score(
        scorecard: ScorecardInput,
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> ScoreResult:
        """Score one scorecard."""
        return ScoreEngine.score_scorecard(scorecard, catalogue)

    @staticmethod
    def section_scores(
        record: ScorecardRecord,
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> dict[str, SectionScore]:
        """
        Section breakdown of a stored scorecard.

        Args:
            record: Stored scorecard
            catalogue: Catalogue to aggregate against

        Returns:
            Section key -> SectionScore
        """
        metric_scores = MetricScorer.score_metrics(ScorecardService.record_to_input(record))
        return SectionAggregator.aggregate_sections(metric_scores, catalogue)

    @staticmethod
    def group_by_business(
        records: Sequence[ScorecardRecord],
    ) -> dict[str, list[ScorecardRecord]]:
        """Group stored scorecards by business ID, preserving input order."""
        grouped: dict[str, list[ScorecardRecord]] = defaultdict(list)
        for record in records:
            grouped[record.business_id].append(record)
        return dict(grouped)

    @staticmethod
    def build_business_summaries(
        records: Sequence[ScorecardRecord],
    ) -> tuple[list[BusinessSummary], dict[str, ScorecardRecord]]:
        """
        Build a BusinessSummary per business from its stored scorecards.

        The latest scorecard supplies the score, RAG status and commentary;
        the one before it supplies the trend.

        Args:
            records: Stored scorecards across any number of businesses

        Returns:
            Tuple of (summaries sorted by business name, business ID -> latest record)

        Raises:
            ScorecardIntegrityError: If a business has tied latest or previous months
        """
        summaries: list[BusinessSummary] = []
        latest_records: dict[str, ScorecardRecord] = {}

        for business_id, business_records in ScorecardService.group_by_business(records).items():
            latest, previous = TrendAnalyzer.select_latest_pair(business_records)
            if latest is None:
                continue

            trend = TrendAnalyzer.compute_trend(
                latest.total_score,
                previous.total_score if previous else None,
            )
            stored_rag = ScoreEngine.rag_from_score(latest.total_score)
            if latest.rag_status and latest.rag_status != stored_rag.value:
                logger.warning(
                    "Stored RAG %r for business %s (%s) does not match score %d; using %s",
                    latest.rag_status,
                    business_id,
                    latest.month,
                    latest.total_score,
                    stored_rag.value,
                )

            summaries.append(BusinessSummary(
                business_id=business_id,
                business_name=latest.business_name or business_id,
                latest_score=latest.total_score,
                rag_status=stored_rag,
                month=latest.month,
                trend=trend,
                top_risk=latest.biggest_risk,
                top_opportunity=latest.biggest_opportunity,
            ))
            latest_records[business_id] = latest

        summaries.sort(key=lambda s: (s.business_name, s.business_id))
        return summaries, latest_records

    @staticmethod
    def build_portfolio_aggregate(
        records: Sequence[ScorecardRecord],
        catalogue: SectionCatalogue = FULL_CATALOGUE,
        limit: Optional[int] = None,
    ) -> PortfolioAggregate:
        """
        Aggregate stored scorecards into a portfolio summary.

        Args:
            records: Stored scorecards across the portfolio
            catalogue: Catalogue for the section breakdowns
            limit: Keep at most this many businesses, lowest scores first

        Returns:
            PortfolioAggregate
        """
        summaries, latest_records = ScorecardService.build_business_summaries(records)

        if limit is not None:
            summaries = ScorecardService.cap_summaries(summaries, limit)

        section_scores_by_business = {
            s.business_id: ScorecardService.section_scores(latest_records[s.business_id], catalogue)
            for s in summaries
        }

        return PortfolioAggregator.aggregate(summaries, section_scores_by_business, catalogue)

    @staticmethod
    def cap_summaries(
        summaries: Sequence[BusinessSummary],
        limit: int,
    ) -> list[BusinessSummary]:
        """
        Keep at most `limit` businesses, preferring the lowest scores.

        Businesses most in need of attention survive the cut. The result keeps
        the input order of the businesses that remain.
        """
        if limit < 0:
            raise ValueError("limit must not be negative")
        if len(summaries) <= limit:
            return list(summaries)

        keep = sorted(
            range(len(summaries)),
            key=lambda i: (summaries[i].latest_score, summaries[i].business_name, summaries[i].business_id),
        )[:limit]
        kept = [summaries[i] for i in sorted(keep)]

        logger.info(
            "Capped portfolio from %d to %d businesses",
            len(summaries),
            len(kept),
        )
        return kept
