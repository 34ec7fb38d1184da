"""
Section Aggregator
Sums metric scores into section subtotals, excluding not-applicable metrics
from both the score and the denominator.
"""

import logging
from typing import Iterable

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import (
    FULL_CATALOGUE,
    CatalogueVariant,
    MetricId,
    SectionCatalogue,
)
from scorecard_engine.scoring.models import MetricScore, SectionScore

logger = logging.getLogger(__name__)


class SectionAggregator:
    """Builds section subtotals from metric scores."""

    @staticmethod
    def aggregate_section(
        metric_scores: Iterable[MetricScore],
        catalogue: CatalogueVariant = CatalogueVariant.FULL,
    ) -> SectionScore:
        """
        Sum applicable metric scores and their maxima.

        A section whose metrics are all excluded returns score 0 / max 0,
        which callers must read as "no data" rather than 0%.

        Args:
            metric_scores: Metric scores belonging to one section
            catalogue: Catalogue variant the section belongs to

        Returns:
            SectionScore for the section

        Raises:
            ScorecardIntegrityError: If a metric is negative, exceeds its maximum, or the
                applicable maxima sum to zero while the score does not
        """
        score = 0.0
        max_score = 0.0

        for metric in metric_scores:
            if not metric.is_applicable:
                continue
            if metric.score < 0:
                raise ScorecardIntegrityError(
                    f"Metric {metric.metric_id.value} has negative score {metric.score}"
                )
            if metric.score > metric.max_score:
                raise ScorecardIntegrityError(
                    f"Metric {metric.metric_id.value} scored {metric.score} above its maximum {metric.max_score}"
                )
            score += metric.score
            max_score += metric.max_score

        if max_score == 0 and score != 0:
            raise ScorecardIntegrityError(
                f"Section has score {score} but no applicable maximum"
            )

        return SectionScore(score=score, max_score=max_score, catalogue=CatalogueVariant(catalogue))

    @staticmethod
    def aggregate_sections(
        metric_scores: dict[MetricId, MetricScore],
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> dict[str, SectionScore]:
        """
        Build every section of a catalogue from a scorecard's metric scores.

        Only the metrics the catalogue lists for a section count towards it,
        so the chart-display catalogue ignores the metrics it omits.

        Args:
            metric_scores: Metric ID -> MetricScore for one scorecard
            catalogue: Section catalogue to aggregate against

        Returns:
            Section key -> SectionScore, in catalogue order
        """
        sections: dict[str, SectionScore] = {}

        for section in catalogue.sections:
            members = [metric_scores[m] for m in section.metric_ids if m in metric_scores]
            subtotal = SectionAggregator.aggregate_section(members, catalogue.variant)
            if not subtotal.has_data:
                logger.debug("Section %s has no applicable metrics", section.key)
            sections[section.key] = subtotal

        return sections
