"""
Metric Scorer

Maps single metric inputs to points:
- Financial variances (revenue, gross profit, net profit): higher is better
- Overheads vs budget: lower is better (same tiers on the negated variance)
- Productivity vs benchmark: wider tiers (+/-15%, +/-5%)
- Qualitative metrics: direct lookup in the option points tables

A metric with no input, a NaN variance or an explicit "not applicable" option is
excluded from its section rather than scored as zero.
"""

import logging
import math
from enum import Enum
from typing import Optional, Union

from scorecard_engine.scoring.constants import (
    FINANCIAL_VARIANCE_TIERS,
    PRODUCTIVITY_VARIANCE_TIERS,
    VARIANCE_CLAMP_MAX,
    VARIANCE_CLAMP_MIN,
    VARIANCE_FLOOR_POINTS,
    VARIANCE_MAX_POINTS,
    MetricId,
    Polarity,
)
from scorecard_engine.scoring.models import MetricScore, ScorecardInput
from scorecard_engine.scoring.options import (
    LEADERSHIP_SCORES,
    MARKET_DEMAND_SCORES,
    MARKETING_SCORES,
    PRODUCT_SCORES,
    SALES_SCORES,
    SUPPLIER_SCORES,
    option_points,
)
from scorecard_engine.scoring.utils import clamp
from scorecard_engine.scoring.variance import calculate_productivity_variance

logger = logging.getLogger(__name__)


class MetricScorer:
    """
    Scores individual metrics.

    All methods are pure; they hold no state and are safe to call
    concurrently.
    """

    @staticmethod
    def score_variance(
        percent: float,
        polarity: Union[Polarity, str] = Polarity.HIGHER_IS_BETTER,
        tiers: tuple[tuple[float, int], ...] = FINANCIAL_VARIANCE_TIERS,
    ) -> int:
        """
        Score a signed variance percentage against a tier table.

        Values outside [-100, 100] are clamped. NaN scores the floor; callers
        mapping stored data convert malformed values to None beforehand.

        Args:
            percent: Variance from target/budget in percent
            polarity: Whether a higher or lower variance is better
            tiers: (lower_bound, points) pairs in descending order

        Returns:
            Integer points between 0 and the top tier's points
        """
        if percent is None or math.isnan(percent):
            return VARIANCE_FLOOR_POINTS

        value = clamp(float(percent), VARIANCE_CLAMP_MIN, VARIANCE_CLAMP_MAX)
        if Polarity(polarity) == Polarity.LOWER_IS_BETTER:
            value = -value

        for lower_bound, points in tiers:
            if value >= lower_bound:
                return points
        return VARIANCE_FLOOR_POINTS

    @staticmethod
    def score_financial_metric(variance_percent: float) -> int:
        """Score revenue, gross profit or net profit variance (10 pts max)."""
        return MetricScorer.score_variance(variance_percent, Polarity.HIGHER_IS_BETTER)

    @staticmethod
    def score_overheads(variance_percent: float) -> int:
        """Score overheads vs budget (10 pts max). Underspend scores highest."""
        return MetricScorer.score_variance(variance_percent, Polarity.LOWER_IS_BETTER)

    @staticmethod
    def score_productivity(variance_percent: float) -> int:
        """Score productivity vs benchmark (10 pts max)."""
        return MetricScorer.score_variance(
            variance_percent,
            Polarity.HIGHER_IS_BETTER,
            PRODUCTIVITY_VARIANCE_TIERS,
        )

    @staticmethod
    def _is_missing(value: Optional[float], field_name: str) -> bool:
        """True when a numeric input is absent or NaN; NaN is logged."""
        if value is None:
            return True
        if math.isnan(value):
            logger.warning("Non-numeric %s treated as not applicable", field_name)
            return True
        return False

    @staticmethod
    def _variance_metric(
        metric_id: MetricId,
        variance: Optional[float],
        polarity: Polarity,
        tiers: tuple[tuple[float, int], ...] = FINANCIAL_VARIANCE_TIERS,
    ) -> MetricScore:
        if MetricScorer._is_missing(variance, f"{metric_id.value} variance"):
            return MetricScore(metric_id, 0, VARIANCE_MAX_POINTS, is_applicable=False)
        return MetricScore(
            metric_id,
            MetricScorer.score_variance(variance, polarity, tiers),
            VARIANCE_MAX_POINTS,
        )

    @staticmethod
    def score_option(
        metric_id: MetricId,
        table: dict[Enum, float],
        option: Optional[Enum],
    ) -> MetricScore:
        """
        Score a categorical metric by lookup.

        Args:
            metric_id: Metric being scored
            table: Option -> points table for the metric
            option: Selected option, None when unanswered

        Returns:
            MetricScore, not applicable when unanswered or N/A
        """
        max_points = max(table.values())
        points = option_points(table, option)
        if points is None:
            return MetricScore(metric_id, 0, max_points, is_applicable=False)
        return MetricScore(metric_id, points, max_points)

    @staticmethod
    def score_productivity_metric(
        benchmark: Optional[float],
        actual: Optional[float],
    ) -> MetricScore:
        """Score productivity from benchmark and actual GP/wages ratios."""
        benchmark_missing = MetricScorer._is_missing(benchmark, "productivity benchmark")
        actual_missing = MetricScorer._is_missing(actual, "productivity actual")
        if benchmark_missing or actual_missing:
            return MetricScore(MetricId.PRODUCTIVITY, 0, VARIANCE_MAX_POINTS, is_applicable=False)

        variance = calculate_productivity_variance(benchmark, actual)
        return MetricScore(
            MetricId.PRODUCTIVITY,
            MetricScorer.score_productivity(variance),
            VARIANCE_MAX_POINTS,
        )

    @staticmethod
    def score_metrics(scorecard: ScorecardInput) -> dict[MetricId, MetricScore]:
        """
        Score every metric of a scorecard.

        Args:
            scorecard: Engine input for one month

        Returns:
            Dictionary mapping metric ID to its MetricScore
        """
        scores = [
            MetricScorer._variance_metric(
                MetricId.REVENUE, scorecard.revenue_variance, Polarity.HIGHER_IS_BETTER
            ),
            MetricScorer._variance_metric(
                MetricId.GROSS_PROFIT, scorecard.gross_profit_variance, Polarity.HIGHER_IS_BETTER
            ),
            MetricScorer._variance_metric(
                MetricId.OVERHEADS, scorecard.overheads_variance, Polarity.LOWER_IS_BETTER
            ),
            MetricScorer._variance_metric(
                MetricId.NET_PROFIT, scorecard.net_profit_variance, Polarity.HIGHER_IS_BETTER
            ),
            MetricScorer.score_productivity_metric(
                scorecard.productivity_benchmark, scorecard.productivity_actual
            ),
            MetricScorer.score_option(MetricId.LEADERSHIP, LEADERSHIP_SCORES, scorecard.leadership),
            MetricScorer.score_option(MetricId.MARKET_DEMAND, MARKET_DEMAND_SCORES, scorecard.market_demand),
            MetricScorer.score_option(MetricId.MARKETING, MARKETING_SCORES, scorecard.marketing),
            MetricScorer.score_option(MetricId.PRODUCT_STRENGTH, PRODUCT_SCORES, scorecard.product_strength),
            MetricScorer.score_option(MetricId.SUPPLIER_STRENGTH, SUPPLIER_SCORES, scorecard.supplier_strength),
            MetricScorer.score_option(MetricId.SALES_EXECUTION, SALES_SCORES, scorecard.sales_execution),
        ]

        excluded = [s.metric_id.value for s in scores if not s.is_applicable]
        if excluded:
            logger.debug("Metrics excluded as not applicable: %s", ", ".join(excluded))

        return {s.metric_id: s for s in scores}
