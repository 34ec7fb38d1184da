"""
Portfolio Aggregator

Condenses the latest scorecards of every business in a portfolio into a
compact summary for dashboards and AI analysis prompts.

The aggregate includes:
- RAG distribution counts
- Score statistics (average, range)
- Section-level weakness analysis
- Anomalies (pre-flagged by the trend analyzer)
- Per-business capsules with the key commentary verbatim
"""

import logging
from typing import Mapping, Optional, Sequence

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import (
    FULL_CATALOGUE,
    SECTION_WEAKNESS_FRACTION,
    UNSPECIFIED_TEXT,
    RagStatus,
    SectionCatalogue,
)
from scorecard_engine.scoring.models import (
    Anomaly,
    BusinessCapsule,
    BusinessSummary,
    PortfolioAggregate,
    SectionScore,
    WeakSection,
)
from scorecard_engine.scoring.utils import round_half_up

logger = logging.getLogger(__name__)


class PortfolioAggregator:
    """
    Builds PortfolioAggregate objects.

    Aggregation is pure and deterministic: the same inputs always produce an
    equal aggregate. It does not cap the number of businesses; callers limit
    the portfolio before aggregating when the result feeds a prompt.
    """

    @staticmethod
    def empty() -> PortfolioAggregate:
        """Well-formed aggregate for a portfolio with no businesses."""
        return PortfolioAggregate(
            total_businesses=0,
            analysis_month=None,
            distribution={status.value: 0 for status in RagStatus},
            average_score=0,
            score_range={"min": 0, "max": 0},
        )

    @staticmethod
    def _check_catalogue(
        section_scores_by_business: Mapping[str, Mapping[str, SectionScore]],
        catalogue: SectionCatalogue,
    ) -> None:
        for business_id, sections in section_scores_by_business.items():
            for key, subtotal in sections.items():
                if subtotal.catalogue != catalogue.variant:
                    raise ScorecardIntegrityError(
                        f"Business {business_id} section '{key}' was built against the "
                        f"{subtotal.catalogue.value} catalogue, expected {catalogue.variant.value}"
                    )
                if catalogue.get(key) is None:
                    raise ScorecardIntegrityError(
                        f"Business {business_id} has unknown section '{key}'"
                    )

    @staticmethod
    def weakest_section_for(
        sections: Optional[Mapping[str, SectionScore]],
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> Optional[str]:
        """
        Label of a business's weakest section (lowest percent of max).

        Sections without data are skipped; ties keep catalogue order.
        Returns None when the business has no section data at all.
        """
        if not sections:
            return None

        weakest: Optional[str] = None
        lowest_pct: Optional[float] = None

        for definition in catalogue.sections:
            subtotal = sections.get(definition.key)
            if subtotal is None or subtotal.percent is None:
                continue
            if lowest_pct is None or subtotal.percent < lowest_pct:
                lowest_pct = subtotal.percent
                weakest = definition.label

        return weakest

    @staticmethod
    def calculate_weakest_sections(
        section_scores_by_business: Mapping[str, Mapping[str, SectionScore]],
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> list[WeakSection]:
        """
        Rank catalogue sections by portfolio-wide weakness.

        For each section, only businesses with data for it count. Percent of
        max is the average score over the average applicable max, so
        businesses with N/A metrics are compared on what they could score.

        Returns:
            WeakSection list, weakest first; sections with no data are omitted
        """
        weak_sections: list[WeakSection] = []

        for definition in catalogue.sections:
            with_data = [
                sections[definition.key]
                for sections in section_scores_by_business.values()
                if definition.key in sections and sections[definition.key].has_data
            ]
            if not with_data:
                continue

            avg_score = sum(s.score for s in with_data) / len(with_data)
            avg_max = sum(s.max_score for s in with_data) / len(with_data)
            below_half = sum(
                1 for s in with_data
                if s.score < s.max_score * SECTION_WEAKNESS_FRACTION
            )

            weak_sections.append(WeakSection(
                section=definition.label,
                avg_score=avg_score,
                percent_of_max=(avg_score / avg_max) * 100,
                businesses_below_50_pct=below_half,
            ))

        # sorted() is stable so equal percentages stay in catalogue order
        return sorted(weak_sections, key=lambda s: s.percent_of_max)

    @staticmethod
    def aggregate(
        business_summaries: Sequence[BusinessSummary],
        section_scores_by_business: Mapping[str, Mapping[str, SectionScore]],
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> PortfolioAggregate:
        """
        Aggregate a portfolio.

        Args:
            business_summaries: Latest score and trend per business
            section_scores_by_business: Business ID -> section key -> SectionScore
            catalogue: Catalogue every section score was built against

        Returns:
            PortfolioAggregate

        Raises:
            ScorecardIntegrityError: If section scores from different
                catalogue variants are mixed
        """
        PortfolioAggregator._check_catalogue(section_scores_by_business, catalogue)

        if not business_summaries:
            return PortfolioAggregator.empty()

        distribution = {status.value: 0 for status in RagStatus}
        for summary in business_summaries:
            distribution[RagStatus(summary.rag_status).value] += 1

        scores = [s.latest_score for s in business_summaries]
        average_score = round_half_up(sum(scores) / len(scores))

        relevant_sections = {
            s.business_id: section_scores_by_business[s.business_id]
            for s in business_summaries
            if s.business_id in section_scores_by_business
        }

        businesses: list[BusinessCapsule] = []
        for summary in business_summaries:
            sections = relevant_sections.get(summary.business_id)
            if sections is None:
                logger.debug("No section scores for business %s", summary.business_id)

            businesses.append(BusinessCapsule(
                name=summary.business_name,
                score=summary.latest_score,
                rag=RagStatus(summary.rag_status),
                trend=summary.trend.direction if summary.trend else None,
                trend_change=summary.trend.change if summary.trend else None,
                top_risk=summary.top_risk or UNSPECIFIED_TEXT,
                top_opportunity=summary.top_opportunity or UNSPECIFIED_TEXT,
                weakest_section=PortfolioAggregator.weakest_section_for(sections, catalogue),
            ))

        anomalies = [
            Anomaly(
                business_name=s.business_name,
                score_change=s.trend.change,
                current_score=s.latest_score,
                rag_status=RagStatus(s.rag_status),
            )
            for s in business_summaries
            if s.is_anomaly
        ]

        months = [s.month for s in business_summaries if s.month]
        analysis_month = max(months) if months else None

        aggregate = PortfolioAggregate(
            total_businesses=len(business_summaries),
            analysis_month=analysis_month,
            distribution=distribution,
            average_score=average_score,
            score_range={"min": min(scores), "max": max(scores)},
            weakest_sections=PortfolioAggregator.calculate_weakest_sections(
                relevant_sections, catalogue
            ),
            anomalies=anomalies,
            businesses=businesses,
        )

        logger.info(
            "Aggregated portfolio of %d businesses for %s (%d anomalies)",
            aggregate.total_businesses,
            analysis_month,
            len(anomalies),
        )

        return aggregate
