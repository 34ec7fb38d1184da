"""Tests for total score and RAG computation."""

import pytest

from scorecard_engine.core.errors import ScorecardIntegrityError
from scorecard_engine.scoring.constants import (
    AMBER_THRESHOLD,
    CHART_DISPLAY_CATALOGUE,
    GREEN_THRESHOLD,
    MAX_TOTAL_SCORE,
    CatalogueVariant,
    RagStatus,
)
from scorecard_engine.scoring.models import ScorecardInput, SectionScore
from scorecard_engine.scoring.score_engine import ScoreEngine, rag_from_score


class TestRagFromScore:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, RagStatus.GREEN),
            (75, RagStatus.GREEN),
            (74, RagStatus.AMBER),
            (60, RagStatus.AMBER),
            (59, RagStatus.RED),
            (0, RagStatus.RED),
        ],
    )
    def test_bands(self, score, expected):
        assert rag_from_score(score) == expected

    def test_thresholds(self):
        assert GREEN_THRESHOLD == 75
        assert AMBER_THRESHOLD == 60

    def test_boundary_is_stable(self):
        results = {ScoreEngine.rag_from_score(GREEN_THRESHOLD) for _ in range(5)}
        assert results == {RagStatus.GREEN}

    def test_round_trip_from_stored_total(self, max_scorecard, on_target_scorecard):
        for scorecard in (max_scorecard, on_target_scorecard, ScorecardInput()):
            stored = ScoreEngine.score_scorecard(scorecard).to_dict()
            assert rag_from_score(stored["total_score"]).value == stored["rag_status"]


class TestComputeTotal:
    def _sections(self, **scores):
        maxima = {"financial": 40, "people": 20, "market": 15, "product": 10, "suppliers": 5, "sales": 10}
        return {key: SectionScore(scores.get(key, 0), maxima[key]) for key in maxima}

    def test_all_maximum_is_100(self):
        result = ScoreEngine.compute_total(
            self._sections(financial=40, people=20, market=15, product=10, suppliers=5, sales=10)
        )
        assert result.total_score == 100
        assert result.rag_status == RagStatus.GREEN

    def test_rounds_half_up(self):
        result = ScoreEngine.compute_total(
            self._sections(financial=40, people=20, market=14.5)
        )
        assert result.total_score == 75
        assert result.rag_status == RagStatus.GREEN

    def test_total_never_exceeds_100(self):
        result = ScoreEngine.compute_total(
            self._sections(financial=40, people=20, market=15, product=10, suppliers=5, sales=10)
        )
        assert result.total_score <= MAX_TOTAL_SCORE

    def test_unknown_section_raises(self):
        with pytest.raises(ScorecardIntegrityError, match="Unknown section"):
            ScoreEngine.compute_total({"marketing": SectionScore(5, 10)})

    def test_section_above_catalogue_max_raises(self):
        with pytest.raises(ScorecardIntegrityError):
            ScoreEngine.compute_total({"financial": SectionScore(41, 41)})

    def test_score_without_maximum_raises(self):
        with pytest.raises(ScorecardIntegrityError, match="no applicable maximum"):
            ScoreEngine.compute_total({"financial": SectionScore(5, 0)})

    def test_negative_section_raises(self):
        with pytest.raises(ScorecardIntegrityError, match="negative"):
            ScoreEngine.compute_total(self._sections(financial=-5))

    def test_section_above_its_own_max_raises(self):
        with pytest.raises(ScorecardIntegrityError):
            ScoreEngine.compute_total({"people": SectionScore(15, 10)})

    def test_keeps_section_subtotals(self):
        sections = self._sections(financial=30)
        result = ScoreEngine.compute_total(sections)
        assert result.section_subtotals == sections

    def test_to_dict(self):
        result = ScoreEngine.compute_total(self._sections(financial=30, sales=10))
        data = result.to_dict()
        assert data["total_score"] == 40
        assert data["rag_status"] == "red"
        assert data["section_subtotals"]["financial"] == {"score": 30, "max_score": 40}


class TestScoreScorecard:
    def test_max_scorecard(self, max_scorecard):
        result = ScoreEngine.score_scorecard(max_scorecard)
        assert result.total_score == 100
        assert result.rag_status == RagStatus.GREEN

    def test_on_target_scorecard(self, on_target_scorecard):
        result = ScoreEngine.score_scorecard(on_target_scorecard)
        assert result.total_score == 62
        assert result.rag_status == RagStatus.AMBER

    def test_empty_scorecard_scores_zero(self):
        result = ScoreEngine.score_scorecard(ScorecardInput())
        assert result.total_score == 0
        assert result.rag_status == RagStatus.RED
        assert all(not s.has_data for s in result.section_subtotals.values())

    def test_chart_catalogue_total(self, max_scorecard):
        result = ScoreEngine.score_scorecard(max_scorecard, CHART_DISPLAY_CATALOGUE)
        assert result.total_score == 70
        assert all(
            s.catalogue == CatalogueVariant.CHART_DISPLAY for s in result.section_subtotals.values()
        )
