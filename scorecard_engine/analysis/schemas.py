"""
Analysis Schemas
Pydantic models for AI-generated portfolio and business analyses.
"""

from typing import Literal

from pydantic import BaseModel, Field


class AttentionPriority(BaseModel):
    """A business that needs consultant attention."""

    business_name: str = Field(..., description="Business name as given in the portfolio aggregate")
    reason: str = Field(..., description="Why the business needs attention")
    urgency: Literal["immediate", "soon", "monitor"] = Field(
        ..., description="immediate = this week, soon = this month, monitor = watch closely"
    )


class PortfolioAnalysis(BaseModel):
    """AI analysis of a whole portfolio."""

    portfolio_summary: str = Field(..., description="Executive overview of portfolio health")
    common_themes: list[str] = Field(..., description="Patterns across multiple businesses")
    attention_priorities: list[AttentionPriority] = Field(
        ..., description="Businesses ranked by urgency of intervention"
    )
    strategic_recommendations: list[str] = Field(..., description="Portfolio-level advice")
    sector_insights: list[str] = Field(default_factory=list, description="Sector-specific insights")
    generated_at: str = Field(..., description="ISO timestamp when analysis was generated")
    model_used: str = Field(..., description="Model used for generation")
    redact_figures: bool = Field(..., description="Whether monetary figures were withheld from the prompt")


class Action30Day(BaseModel):
    """A prioritized action for the next 30 days."""

    action: str
    priority: Literal["high", "medium", "low"]


class BusinessAnalysis(BaseModel):
    """AI analysis of one business's monthly scorecard."""

    exec_summary: str = Field(..., description="Executive summary")
    top_questions: list[str] = Field(..., description="Focus points for next month")
    actions_30_day: list[Action30Day] = Field(..., description="Prioritized 30-day action items")
    inconsistencies: list[str] = Field(..., description="Contradictions between ratings and results")
    trend_breaks: list[str] = Field(..., description="Significant changes vs the prior month")
    generated_at: str = Field(..., description="ISO timestamp when analysis was generated")
    model_used: str = Field(..., description="Model used for generation")
    is_consultant_view: bool = Field(
        False, description="True if generated without specific financial figures"
    )
