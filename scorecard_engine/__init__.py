"""
Business Scorecard Engine
Scores monthly business scorecards and aggregates them across a portfolio.
"""

__version__ = "1.0.0"
