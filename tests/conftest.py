"""Shared fixtures for scorecard engine tests."""

import json
from unittest.mock import MagicMock

import pytest

from scorecard_engine.scoring.models import ScorecardInput, ScorecardRecord
from scorecard_engine.scoring.options import (
    Leadership,
    MarketDemand,
    Marketing,
    ProductStrength,
    SalesExecution,
    SupplierStrength,
)


@pytest.fixture
def max_scorecard() -> ScorecardInput:
    """Every metric at its maximum."""
    return ScorecardInput(
        revenue_variance=12.0,
        gross_profit_variance=10.0,
        overheads_variance=-15.0,
        net_profit_variance=25.0,
        productivity_benchmark=2.0,
        productivity_actual=2.5,
        leadership=Leadership.ALIGNED,
        market_demand=MarketDemand.STRONG,
        marketing=Marketing.CLEAR,
        product_strength=ProductStrength.DIFFERENTIATED,
        supplier_strength=SupplierStrength.STRONG,
        sales_execution=SalesExecution.BEATING,
    )


@pytest.fixture
def on_target_scorecard() -> ScorecardInput:
    """Variances exactly on target with middling ratings (scores 62)."""
    return ScorecardInput(
        revenue_variance=0.0,
        gross_profit_variance=0.0,
        overheads_variance=0.0,
        net_profit_variance=0.0,
        productivity_benchmark=2.0,
        productivity_actual=2.0,
        leadership=Leadership.MINOR,
        market_demand=MarketDemand.FLAT,
        marketing=Marketing.ACTIVITY,
        product_strength=ProductStrength.ADEQUATE,
        supplier_strength=SupplierStrength.ACCEPTABLE,
        sales_execution=SalesExecution.ON_TARGET,
    )


@pytest.fixture
def make_record():
    """Factory for stored scorecard records."""

    def _make(
        business_id: str = "biz-1",
        month: str = "2026-03",
        total_score: int = 62,
        **overrides,
    ) -> ScorecardRecord:
        fields = {
            "business_id": business_id,
            "month": month,
            "total_score": total_score,
            "rag_status": overrides.pop("rag_status", _rag_for(total_score)),
            "business_name": overrides.pop("business_name", business_id.replace("-", " ").title()),
            "revenue_variance": 0.0,
            "gross_profit_variance": 0.0,
            "overheads_variance": 0.0,
            "net_profit_variance": 0.0,
            "productivity_benchmark": 2.0,
            "productivity_actual": 2.0,
            "leadership": "minor",
            "market_demand": "flat",
            "marketing": "activity",
            "product_strength": "adequate",
            "supplier_strength": "acceptable",
            "sales_execution": "onTarget",
        }
        fields.update(overrides)
        return ScorecardRecord(**fields)

    return _make


def _rag_for(score: int) -> str:
    if score >= 75:
        return "green"
    if score >= 60:
        return "amber"
    return "red"


@pytest.fixture
def make_openai_client():
    """Factory for a mocked OpenAI client returning the given content."""

    def _make(content=None, side_effect=None) -> MagicMock:
        client = MagicMock()
        if side_effect is not None:
            client.chat.completions.create.side_effect = side_effect
        else:
            if not isinstance(content, str) and content is not None:
                content = json.dumps(content)
            message = MagicMock()
            message.content = content
            choice = MagicMock()
            choice.message = message
            response = MagicMock()
            response.choices = [choice]
            client.chat.completions.create.return_value = response
        return client

    return _make


@pytest.fixture
def portfolio_analysis_payload() -> dict:
    return {
        "portfolio_summary": "Most businesses are on target; two need attention.",
        "common_themes": ["Marketing traction is weak", "Margins under pressure"],
        "attention_priorities": [
            {"business_name": "Beta Builders", "reason": "Score fell 12 points", "urgency": "immediate"},
        ],
        "strategic_recommendations": ["Run a pricing review across the portfolio"],
        "sector_insights": [],
    }


@pytest.fixture
def business_analysis_payload() -> dict:
    return {
        "exec_summary": "Your business is tracking to target.",
        "top_questions": ["Can marketing spend be focused?"],
        "actions_30_day": [{"action": "Review supplier terms", "priority": "high"}],
        "inconsistencies": [],
        "trend_breaks": [],
    }
