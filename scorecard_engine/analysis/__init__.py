"""
Analysis Module
Generates AI narratives for portfolios and individual scorecards.
"""

from scorecard_engine.analysis.ai_analysis_service import AIAnalysisService
from scorecard_engine.analysis.schemas import BusinessAnalysis, PortfolioAnalysis

__all__ = [
    "AIAnalysisService",
    "BusinessAnalysis",
    "PortfolioAnalysis",
]
