"""
Variance Calculator
Converts raw financial figures into the variance percentages used for scoring.
"""

import logging
from typing import Optional

from scorecard_engine.scoring.models import FinancialFigures
from scorecard_engine.scoring.utils import safe_divide

logger = logging.getLogger(__name__)


def calculate_variance(actual: float, target: float) -> float:
    """
    Calculate variance percentage of actual against target.

    Positive means above target. A zero target yields 0 rather than a
    division error.
    """
    return safe_divide(actual - target, target) * 100


def calculate_productivity_ratio(gross_profit: float, wages: float) -> float:
    """Productivity ratio: gross profit per unit of wages (0 when wages is 0)."""
    return safe_divide(gross_profit, wages)


def calculate_productivity_variance(benchmark: float, actual: float) -> float:
    """
    Variance of the actual GP/wages ratio against its benchmark.

    Args:
        benchmark: Benchmark GP/wages ratio (e.g. 2.0)
        actual: Actual GP/wages ratio (e.g. 2.3)

    Returns:
        Variance percentage (e.g. 15.0 for 15% above benchmark)
    """
    return calculate_variance(actual, benchmark)


def figures_to_variances(figures: FinancialFigures) -> dict[str, Optional[float]]:
    """
    Convert raw submitted figures to scorecard variances.

    Fields flagged N/A come back as None so they are excluded from scoring.
    Productivity depends on both wages and gross profit, so either flag
    makes it not applicable.

    Args:
        figures: Raw monetary figures with N/A flags

    Returns:
        Dictionary with revenue/gross_profit/overheads/net_profit variances
        and productivity benchmark/actual ratio
    """
    def _variance(is_na: bool, actual: Optional[float], target: Optional[float]) -> Optional[float]:
        if is_na:
            return None
        return calculate_variance(actual or 0.0, target or 0.0)

    productivity_na = figures.wages_na or figures.gross_profit_na

    productivity_actual: Optional[float] = None
    productivity_benchmark: Optional[float] = None
    if not productivity_na:
        productivity_actual = calculate_productivity_ratio(
            figures.gross_profit_actual or 0.0,
            figures.total_wages or 0.0,
        )
        productivity_benchmark = figures.productivity_benchmark or 0.0

    variances = {
        "revenue_variance": _variance(figures.revenue_na, figures.revenue_actual, figures.revenue_target),
        "gross_profit_variance": _variance(
            figures.gross_profit_na, figures.gross_profit_actual, figures.gross_profit_target
        ),
        "overheads_variance": _variance(figures.overheads_na, figures.overheads_actual, figures.overheads_budget),
        # Net profit has no N/A option
        "net_profit_variance": _variance(False, figures.net_profit_actual, figures.net_profit_target),
        "productivity_benchmark": productivity_benchmark,
        "productivity_actual": productivity_actual,
    }

    logger.debug(
        "Converted figures to variances (N/A: revenue=%s, gross_profit=%s, overheads=%s, wages=%s)",
        figures.revenue_na,
        figures.gross_profit_na,
        figures.overheads_na,
        figures.wages_na,
    )

    return variances


def format_variance(variance: Optional[float]) -> str:
    """Format a variance for display, e.g. +4.5% or N/A."""
    if variance is None:
        return "N/A"
    sign = "+" if variance >= 0 else ""
    return f"{sign}{variance:.1f}%"
