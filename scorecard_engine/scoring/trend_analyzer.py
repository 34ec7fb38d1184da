"""
Trend analysis for month-over-month scorecard movement.
"""

import logging
from typing import Optional, Sequence

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import ANOMALY_THRESHOLD
from scorecard_engine.scoring.models import ScorecardRecord, TrendResult

logger = logging.getLogger(__name__)


class TrendAnalyzer:
    """
    Compares a business's two most recent total scores.

    Anomaly flags are informational only; dashboards and the portfolio
    aggregator decide what to do with them.
    """

    @staticmethod
    def compute_trend(current: int, previous: Optional[int]) -> Optional[TrendResult]:
        """
        Calculate trend between two total scores.

        Args:
            current: This month's total score
            previous: Prior month's total score, None for a first scorecard

        Returns:
            TrendResult, or None if there is no previous score
        """
        if previous is None:
            return None

        change = current - previous

        if change > 0:
            direction = "up"
        elif change < 0:
            direction = "down"
        else:
            direction = "same"

        return TrendResult(
            direction=direction,
            change=change,
            is_anomaly=change <= ANOMALY_THRESHOLD,
        )

    @staticmethod
    def select_latest_pair(
        records: Sequence[ScorecardRecord],
    ) -> tuple[Optional[ScorecardRecord], Optional[ScorecardRecord]]:
        """
        Pick the latest and previous scorecards for one business.

        Records are ordered by reporting month, newest first. Two records
        sharing the latest (or previous) month are a data-integrity bug and
        are not silently resolved.

        Args:
            records: All stored scorecards of a single business

        Returns:
            Tuple of (latest, previous); either may be None

        Raises:
            ScorecardIntegrityError: If records span several businesses or
                two records tie for the latest or previous month
        """
        if not records:
            return None, None

        business_ids = {r.business_id for r in records}
        if len(business_ids) > 1:
            raise ScorecardIntegrityError(
                f"Trend requested across multiple businesses: {sorted(business_ids)}"
            )

        ordered = sorted(records, key=lambda r: r.month, reverse=True)

        for position, label in ((0, "latest"), (1, "previous")):
            if len(ordered) > position + 1 and ordered[position].month == ordered[position + 1].month:
                raise ScorecardIntegrityError(
                    f"Business {ordered[position].business_id} has multiple {label} "
                    f"scorecards for {ordered[position].month}"
                )

        latest = ordered[0]
        previous = ordered[1] if len(ordered) > 1 else None
        return latest, previous

    @staticmethod
    def trend_for_records(records: Sequence[ScorecardRecord]) -> Optional[TrendResult]:
        """Trend between a business's latest and previous stored scorecards."""
        latest, previous = TrendAnalyzer.select_latest_pair(records)
        if latest is None:
            return None

        trend = TrendAnalyzer.compute_trend(
            latest.total_score,
            previous.total_score if previous else None,
        )
        if trend and trend.is_anomaly:
            logger.info(
                "Anomaly for business %s: %+d points in %s",
                latest.business_id,
                trend.change,
                latest.month,
            )
        return trend
