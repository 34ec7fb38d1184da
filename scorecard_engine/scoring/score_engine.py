"""
Score Engine

Combines section subtotals into a 0-100 total score and RAG status.

Section budgets are additive towards the 100-point ceiling of the full
catalogue; sections are not rescaled to a common denominator, so a
not-applicable metric lowers the attainable total.

RAG bands:
- Green: >= 75
- Amber: >= 60
- Red: < 60
"""

import logging
from typing import Union

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import (
    AMBER_THRESHOLD,
    FULL_CATALOGUE,
    GREEN_THRESHOLD,
    RagStatus,
    SectionCatalogue,
)
from scorecard_engine.scoring.metric_scorer import MetricScorer
from scorecard_engine.scoring.models import ScorecardInput, ScoreResult, SectionScore
from scorecard_engine.scoring.section_aggregator import SectionAggregator
from scorecard_engine.scoring.utils import round_half_up

logger = logging.getLogger(__name__)


class ScoreEngine:
    """Computes total scores and RAG status. Pure and side-effect free."""

    @staticmethod
    def rag_from_score(score: Union[int, float]) -> RagStatus:
        """
        Get RAG status from a total score.

        A score exactly on a band boundary resolves to the higher band.
        """
        if score >= GREEN_THRESHOLD:
            return RagStatus.GREEN
        elif score >= AMBER_THRESHOLD:
            return RagStatus.AMBER
        else:
            return RagStatus.RED

    @staticmethod
    def compute_total(
        sections: dict[str, SectionScore],
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> ScoreResult:
        """
        Sum section subtotals into a total score and derive its RAG status.

        Args:
            sections: Section key -> SectionScore
            catalogue: Catalogue the sections were built against

        Returns:
            ScoreResult with the integer total and RAG status

        Raises:
            ScorecardIntegrityError: If a section is not in the catalogue, is
                negative, scores without a maximum, or scores above its maximum
        """
        for key, subtotal in sections.items():
            definition = catalogue.get(key)
            if definition is None:
                raise ScorecardIntegrityError(
                    f"Unknown section '{key}' for catalogue {catalogue.variant.value}"
                )
            if subtotal.score < 0:
                raise ScorecardIntegrityError(f"Section '{key}' has negative score {subtotal.score}")
            if subtotal.max_score == 0 and subtotal.score != 0:
                raise ScorecardIntegrityError(
                    f"Section '{key}' has score {subtotal.score} but no applicable maximum"
                )
            if subtotal.score > subtotal.max_score or subtotal.score > definition.max_score:
                raise ScorecardIntegrityError(
                    f"Section '{key}' scored {subtotal.score} above its maximum "
                    f"{min(subtotal.max_score, definition.max_score)}"
                )

        raw_total = sum(s.score for s in sections.values())
        total_score = round_half_up(raw_total)
        rag_status = ScoreEngine.rag_from_score(total_score)

        logger.debug(
            "Computed total score %d (raw %.1f) -> %s",
            total_score,
            raw_total,
            rag_status.value,
        )

        return ScoreResult(
            section_subtotals=dict(sections),
            total_score=total_score,
            rag_status=rag_status,
        )

    @staticmethod
    def score_scorecard(
        scorecard: ScorecardInput,
        catalogue: SectionCatalogue = FULL_CATALOGUE,
    ) -> ScoreResult:
        """
        Run the full pipeline: metrics -> sections -> total and RAG.

        Args:
            scorecard: Engine input for one month
            catalogue: Section catalogue (the full catalogue for stored totals)

        Returns:
            ScoreResult
        """
        metric_scores = MetricScorer.score_metrics(scorecard)
        sections = SectionAggregator.aggregate_sections(metric_scores, catalogue)
        return ScoreEngine.compute_total(sections, catalogue)


def rag_from_score(score: Union[int, float]) -> RagStatus:
    """Module-level shortcut for ScoreEngine.rag_from_score."""
    return ScoreEngine.rag_from_score(score)
