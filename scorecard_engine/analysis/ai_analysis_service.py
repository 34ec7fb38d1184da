"""
AI Analysis Service
Generates portfolio and business narratives using OpenAI with structured JSON output.

Analyses enrich scores but never change them: a failed generation raises a
typed error and leaves every computed score valid.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from scorecard_engine.config import settings
from scorecard_engine.core.errors import AnalysisGenerationError, AnalysisValidationError
from scorecard_engine.analysis.schemas import BusinessAnalysis, PortfolioAnalysis
from scorecard_engine.scoring.models import (
    FinancialFigures,
    PortfolioAggregate,
    ScorecardRecord,
)
from scorecard_engine.scoring.options import (
    Leadership,
    LeadershipConfidence,
    MarketDemand,
    Marketing,
    ProductStrength,
    SalesExecution,
    SupplierStrength,
    option_label,
    parse_option,
)
from scorecard_engine.scoring.score_engine import rag_from_score
from scorecard_engine.scoring.utils import safe_float
from scorecard_engine.scoring.variance import calculate_productivity_variance, format_variance
from scorecard_engine.scoring.visibility import should_redact_figures

logger = logging.getLogger(__name__)


class AIAnalysisService:
    """Service for generating scorecard analyses using OpenAI."""

    def __init__(self, client: Optional[OpenAI] = None):
        """
        Initialize OpenAI client.

        Args:
            client: Preconfigured client; built from settings when omitted
        """
        if client is None:
            if not settings.openai_api_key:
                raise ValueError("OPENAI_API_KEY is not configured")
            client = OpenAI(api_key=settings.openai_api_key)

        self.client = client
        self.model = settings.openai_model
        self.temperature = settings.analysis_temperature

    # =====================
    # PORTFOLIO ANALYSIS
    # =====================

    def generate_portfolio_analysis(
        self,
        aggregate: PortfolioAggregate,
        viewer_role: Optional[str],
    ) -> PortfolioAnalysis:
        """
        Generate a portfolio-level analysis.

        Args:
            aggregate: Portfolio aggregate (already capped by the caller)
            viewer_role: Role of the requesting user

        Returns:
            Validated PortfolioAnalysis

        Raises:
            AnalysisGenerationError: If the OpenAI call fails
            AnalysisValidationError: If the response has the wrong shape
        """
        redact = should_redact_figures(viewer_role)

        parsed = self._complete(
            system_prompt=self._get_portfolio_system_prompt(aggregate.total_businesses, redact),
            prompt=self._build_portfolio_prompt(aggregate),
            schema_name="portfolio_analysis",
            schema=self._get_portfolio_json_schema(),
        )

        analysis = self._validate(
            PortfolioAnalysis,
            {
                **parsed,
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "model_used": self.model,
                "redact_figures": redact,
            },
        )

        known_names = {b.name for b in aggregate.businesses}
        for priority in analysis.attention_priorities:
            if priority.business_name not in known_names:
                logger.warning(
                    "Portfolio analysis referenced unknown business %r",
                    priority.business_name,
                )

        logger.info(
            "Generated portfolio analysis for %d businesses (%d attention priorities)",
            aggregate.total_businesses,
            len(analysis.attention_priorities),
        )
        return analysis

    def _get_portfolio_system_prompt(self, total_businesses: int, redact: bool) -> str:
        """Get system prompt for portfolio analysis."""
        prompt = f"""You are a senior business consultant analyzing a portfolio of {total_businesses} client businesses for a monthly review meeting.

RULES:
- Only reference business names from the business_summaries section
- Base all claims on the data provided - do not invent metrics
- Urgency levels: immediate = needs action this week, soon = needs action this month, monitor = watch closely
- portfolio_summary: 150-250 word executive overview of portfolio health
- common_themes: 3-5 patterns across multiple businesses
- strategic_recommendations: 3-5 portfolio-level recommendations
- sector_insights: sector-specific insights, can be empty"""
        if redact:
            prompt += "\n- Do not quote or estimate monetary figures; refer to scores, ratings and trends only"
        return prompt

    def _build_portfolio_prompt(self, aggregate: PortfolioAggregate) -> str:
        """Build user prompt from the portfolio aggregate."""
        distribution = aggregate.distribution

        sections = "\n".join(
            f"- {s.section}: {s.avg_score:.1f} ({s.percent_of_max:.0f}% of max), "
            f"{s.businesses_below_50_pct} businesses below 50%"
            for s in aggregate.weakest_sections
        ) or "No section data available."

        if aggregate.anomalies:
            anomalies = "\n".join(
                f"- {a.business_name}: {a.score_change} points (now {a.current_score}, {a.rag_status.value.upper()})"
                for a in aggregate.anomalies
            )
        else:
            anomalies = "No significant anomalies (10+ point drops) this month."

        businesses = []
        for b in aggregate.businesses:
            trend = b.trend or "N/A"
            if b.trend_change:
                trend += f" ({b.trend_change:+d})"
            businesses.append(
                f"{b.name} | Score: {b.score}/100 ({b.rag.value.upper()}) | Trend: {trend}\n"
                f"  Weakest: {b.weakest_section or 'N/A'}\n"
                f"  Risk: {b.top_risk}\n"
                f"  Opportunity: {b.top_opportunity}"
            )

        return f"""<portfolio_overview>
Analysis Month: {aggregate.analysis_month or 'N/A'}
Total Businesses: {aggregate.total_businesses}
RAG Distribution: {distribution.get('green', 0)} Green, {distribution.get('amber', 0)} Amber, {distribution.get('red', 0)} Red
Average Score: {aggregate.average_score}/100
Score Range: {aggregate.score_range['min']} - {aggregate.score_range['max']}
</portfolio_overview>

<section_performance>
Weakest sections across portfolio (weakest first):
{sections}
</section_performance>

<anomalies_flagged>
{anomalies}
</anomalies_flagged>

<business_summaries>
{chr(10).join(businesses)}
</business_summaries>"""

    def _get_portfolio_json_schema(self) -> dict[str, Any]:
        """Get JSON schema for portfolio analysis structured output."""
        return {
            "type": "object",
            "properties": {
                "portfolio_summary": {"type": "string"},
                "common_themes": {"type": "array", "items": {"type": "string"}},
                "attention_priorities": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "business_name": {"type": "string"},
                            "reason": {"type": "string"},
                            "urgency": {
                                "type": "string",
                                "enum": ["immediate", "soon", "monitor"],
                            },
                        },
                        "required": ["business_name", "reason", "urgency"],
                        "additionalProperties": False,
                    },
                },
                "strategic_recommendations": {"type": "array", "items": {"type": "string"}},
                "sector_insights": {"type": "array", "items": {"type": "string"}},
            },
            "required": [
                "portfolio_summary",
                "common_themes",
                "attention_priorities",
                "strategic_recommendations",
                "sector_insights",
            ],
            "additionalProperties": False,
        }

    # =====================
    # BUSINESS ANALYSIS
    # =====================

    def generate_business_analysis(
        self,
        record: ScorecardRecord,
        previous: Optional[ScorecardRecord],
        business_name: str,
        viewer_role: Optional[str],
        figures: Optional[FinancialFigures] = None,
    ) -> BusinessAnalysis:
        """
        Generate an analysis of one business's monthly scorecard.

        Raw figures are only placed in the prompt when the viewer may see
        them; consultants get an analysis built from variances and ratings.

        Args:
            record: Scorecard being analyzed
            previous: Prior month's scorecard, if any
            business_name: Display name of the business
            viewer_role: Role of the requesting user
            figures: Raw monetary figures behind the variances

        Returns:
            Validated BusinessAnalysis

        Raises:
            AnalysisGenerationError: If the OpenAI call fails
            AnalysisValidationError: If the response has the wrong shape
        """
        redact = should_redact_figures(viewer_role)
        if redact and figures is not None:
            logger.debug("Withholding financial figures from analysis prompt for %s", business_name)

        prompt = self._build_business_prompt(
            record,
            previous,
            business_name,
            figures=None if redact else figures,
            redact=redact,
        )

        parsed = self._complete(
            system_prompt=self._get_business_system_prompt(redact),
            prompt=prompt,
            schema_name="business_analysis",
            schema=self._get_business_json_schema(),
        )

        return self._validate(
            BusinessAnalysis,
            {
                **parsed,
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "model_used": self.model,
                "is_consultant_view": redact,
            },
        )

    def _get_business_system_prompt(self, redact: bool) -> str:
        """Get system prompt for business analysis."""
        prompt = """You are a business performance advisor providing insights for a monthly business scorecard review.

Output requirements:
- exec_summary: 150-250 words. Synthesize the scorecard into a clear narrative, highlighting what is going well and what needs attention
- top_questions: 5 focus points for next month, specific and grounded in the metrics
- actions_30_day: prioritized concrete actions (high/medium/low), quick wins and urgent issues first
- inconsistencies: contradictions between qualitative ratings and quantitative results, empty if none
- trend_breaks: significant changes vs the prior month (10+ point score change, RAG change, major metric swings), empty if no prior data"""
        if redact:
            prompt += """

This analysis is for a consultant. Do not quote or estimate monetary amounts; use variance percentages, ratings and scores only."""
        return prompt

    def _build_business_prompt(
        self,
        record: ScorecardRecord,
        previous: Optional[ScorecardRecord],
        business_name: str,
        figures: Optional[FinancialFigures] = None,
        redact: bool = True,
    ) -> str:
        """Build user prompt for a single business scorecard."""
        is_self_assessment = not record.consultant_name and not record.biggest_opportunity

        benchmark = safe_float(record.productivity_benchmark, "productivity_benchmark")
        actual = safe_float(record.productivity_actual, "productivity_actual")
        productivity = (
            format_variance(calculate_productivity_variance(benchmark, actual))
            if benchmark is not None and actual is not None
            else "N/A"
        )

        lines = [
            f"BUSINESS: {business_name}",
            f"MONTH: {record.month}",
            f"TYPE: {'Self-Assessment' if is_self_assessment else 'Consultant Review'}",
            f"OVERALL SCORE: {record.total_score}/100 ({rag_from_score(record.total_score).value.upper()})",
            "",
            "=== FINANCIAL PERFORMANCE ===",
            f"Revenue vs Target: {format_variance(safe_float(record.revenue_variance))}",
            f"Gross Profit vs Target: {format_variance(safe_float(record.gross_profit_variance))}",
            f"Overheads vs Budget: {format_variance(safe_float(record.overheads_variance))}",
            f"Net Profit vs Target: {format_variance(safe_float(record.net_profit_variance))}",
        ]

        if figures is not None:
            lines.extend(self._format_figures(figures))

        lines.extend([
            "",
            "=== PEOPLE ===",
            f"Productivity vs Benchmark: {productivity}",
        ])
        if not redact:
            lines.append(f"Productivity Benchmark: {benchmark if benchmark is not None else 'N/A'}")
            lines.append(f"Productivity Actual: {actual if actual is not None else 'N/A'}")

        lines.extend([
            f"Leadership: {option_label(parse_option(Leadership, record.leadership, 'leadership'))}",
            "",
            "=== MARKET ===",
            f"Market Demand: {option_label(parse_option(MarketDemand, record.market_demand, 'market_demand'))}",
            f"Marketing Effectiveness: {option_label(parse_option(Marketing, record.marketing, 'marketing'))}",
            "",
            "=== PRODUCT ===",
            f"Product Strength: {option_label(parse_option(ProductStrength, record.product_strength, 'product_strength'))}",
            "",
            "=== SUPPLIERS ===",
            f"Supplier Strength: {option_label(parse_option(SupplierStrength, record.supplier_strength, 'supplier_strength'))}",
            "",
            "=== SALES ===",
            f"Sales Execution: {option_label(parse_option(SalesExecution, record.sales_execution, 'sales_execution'))}",
        ])

        if not is_self_assessment:
            confidence = parse_option(
                LeadershipConfidence, record.leadership_confidence, "leadership_confidence"
            )
            lines.extend([
                "",
                "=== CONSULTANT COMMENTARY ===",
                f"Biggest Opportunity: {record.biggest_opportunity or 'Not specified'}",
                f"Biggest Risk: {record.biggest_risk or 'Not specified'}",
                f"Management Avoiding: {record.management_avoiding or 'Not specified'}",
                f"Confident in Leadership: {confidence.value if confidence else 'Not specified'}",
                f"Gut Feel: {record.consultant_gut_feel or 'Not specified'}",
            ])

        lines.append("")
        if previous is not None:
            lines.extend([
                f"=== PREVIOUS MONTH ({previous.month}) ===",
                f"Previous Score: {previous.total_score}/100 ({rag_from_score(previous.total_score).value.upper()})",
                f"Score Change: {record.total_score - previous.total_score} points",
            ])
        else:
            lines.extend([
                "=== PREVIOUS MONTH ===",
                "No prior month data available",
            ])

        lines.extend([
            "",
            "INCONSISTENCY DETECTION:",
            "Flag these contradictions only if the data clearly shows them:",
            "1. Strong market demand BUT negative revenue variance",
            "2. Sales beating targets BUT productivity below benchmark",
            "3. Aligned leadership BUT multiple negative financial variances",
            "4. Differentiated product BUT negative gross profit variance",
            "5. Score rising BUT negative net profit variance",
        ])

        return "\n".join(lines)

    @staticmethod
    def _format_figures(figures: FinancialFigures) -> list[str]:
        """Format raw monetary figures for the prompt."""
        def _amount(value: Optional[float], is_na: bool = False) -> str:
            if is_na or value is None:
                return "N/A"
            sign = "-" if value < 0 else ""
            return f"{sign}£{abs(value):,.0f}"

        return [
            f"Revenue: {_amount(figures.revenue_actual, figures.revenue_na)} "
            f"(target {_amount(figures.revenue_target, figures.revenue_na)})",
            f"Gross Profit: {_amount(figures.gross_profit_actual, figures.gross_profit_na)} "
            f"(target {_amount(figures.gross_profit_target, figures.gross_profit_na)})",
            f"Overheads: {_amount(figures.overheads_actual, figures.overheads_na)} "
            f"(budget {_amount(figures.overheads_budget, figures.overheads_na)})",
            f"Net Profit: {_amount(figures.net_profit_actual)} (target {_amount(figures.net_profit_target)})",
            f"Total Wages: {_amount(figures.total_wages, figures.wages_na)}",
        ]

    def _get_business_json_schema(self) -> dict[str, Any]:
        """Get JSON schema for business analysis structured output."""
        string_array = {"type": "array", "items": {"type": "string"}}
        return {
            "type": "object",
            "properties": {
                "exec_summary": {"type": "string"},
                "top_questions": string_array,
                "actions_30_day": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "action": {"type": "string"},
                            "priority": {"type": "string", "enum": ["high", "medium", "low"]},
                        },
                        "required": ["action", "priority"],
                        "additionalProperties": False,
                    },
                },
                "inconsistencies": string_array,
                "trend_breaks": string_array,
            },
            "required": [
                "exec_summary",
                "top_questions",
                "actions_30_day",
                "inconsistencies",
                "trend_breaks",
            ],
            "additionalProperties": False,
        }

    # =====================
    # OPENAI CALLS
    # =====================

    def _complete(
        self,
        system_prompt: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Call OpenAI with a strict JSON schema and parse the response.

        Raises:
            AnalysisGenerationError: If the call fails or returns nothing
            AnalysisValidationError: If the response is not a JSON object
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": schema,
                    },
                },
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("OpenAI API error generating %s: %s", schema_name, e)
            raise AnalysisGenerationError(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AnalysisGenerationError("Empty response from OpenAI")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse OpenAI JSON response: %s", e)
            raise AnalysisValidationError(f"Invalid JSON response from OpenAI: {e}") from e

        if not isinstance(parsed, dict):
            raise AnalysisValidationError("OpenAI response is not a JSON object")

        return parsed

    @staticmethod
    def _validate(model_cls, data: dict[str, Any]):
        """Validate response data against a schema model."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            logger.error("%s validation failed: %s", model_cls.__name__, e)
            raise AnalysisValidationError(
                f"{model_cls.__name__} response had unexpected format"
            ) from e
