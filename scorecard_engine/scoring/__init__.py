"""
Scoring Module
Converts monthly scorecard inputs into scores, RAG status, trends and
portfolio aggregates.
"""

from scorecard_engine.scoring.metric_scorer import MetricScorer
from scorecard_engine.scoring.portfolio_aggregator import PortfolioAggregator
from scorecard_engine.scoring.score_engine import ScoreEngine
from scorecard_engine.scoring.section_aggregator import SectionAggregator
from scorecard_engine.scoring.service import ScorecardService
from scorecard_engine.scoring.trend_analyzer import TrendAnalyzer

__all__ = [
    "MetricScorer",
    "PortfolioAggregator",
    "ScoreEngine",
    "SectionAggregator",
    "ScorecardService",
    "TrendAnalyzer",
]
