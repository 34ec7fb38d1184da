"""
Scorecard Router
API endpoints for scoring, trends, portfolio aggregation and visibility.
"""

import logging

from fastapi import APIRouter

from scorecard_engine.config import settings
from scorecard_engine.scoring.constants import CatalogueVariant, get_catalogue
from scorecard_engine.scoring.dependencies import AnalysisService, ScoreViewer, ViewerRole
from scorecard_engine.scoring.models import FinancialFigures, ScorecardInput, ScorecardRecord
from scorecard_engine.scoring.schemas import (
    BusinessAnalysisRequest,
    BusinessAnalysisResponse,
    PortfolioAggregateResponse,
    PortfolioAnalysisResponse,
    PortfolioRequest,
    ScoreRequest,
    ScoreResponse,
    ScorecardRecordSchema,
    SectionBreakdown,
    SectionsResponse,
    SubmissionRequest,
    SubmissionScoreResponse,
    TrendRequest,
    TrendResponse,
    VisibilityResponse,
)
from scorecard_engine.scoring.service import ScorecardService
from scorecard_engine.scoring.trend_analyzer import TrendAnalyzer
from scorecard_engine.scoring.visibility import (
    can_see_financials,
    can_see_scores,
    should_redact_figures,
    visible_figures,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scorecards", tags=["Scorecards"])
portfolio_router = APIRouter(prefix="/api/portfolio", tags=["Portfolio"])
visibility_router = APIRouter(prefix="/api", tags=["Visibility"])


def _to_record(schema: ScorecardRecordSchema) -> ScorecardRecord:
    return ScorecardRecord(**schema.model_dump())


# =====================
# SCORING
# =====================

@router.post(
    "/score",
    response_model=ScoreResponse,
    summary="Score a scorecard",
    description="Score variances and qualitative ratings into a total score, RAG status and section subtotals.",
)
async def score_scorecard(request: ScoreRequest, role: ScoreViewer) -> ScoreResponse:
    """Score a scorecard given as variances and ratings."""
    result = ScorecardService.score(ScorecardInput(**request.model_dump()))
    return ScoreResponse(**result.to_dict())


@router.post(
    "/score-submission",
    response_model=SubmissionScoreResponse,
    summary="Score a raw submission",
    description="Derive variances from raw figures (honouring N/A flags) and score them.",
)
async def score_submission(request: SubmissionRequest, role: ScoreViewer) -> SubmissionScoreResponse:
    """
    Score a monthly submission of raw figures.

    The submitted figures are echoed back only to roles allowed to see them.
    """
    figures = FinancialFigures(**request.figures.model_dump())
    scorecard = ScorecardService.figures_to_input(figures, **request.ratings.model_dump())
    result = ScorecardService.score(scorecard)

    return SubmissionScoreResponse(
        **result.to_dict(),
        variances={
            "revenue_variance": scorecard.revenue_variance,
            "gross_profit_variance": scorecard.gross_profit_variance,
            "overheads_variance": scorecard.overheads_variance,
            "net_profit_variance": scorecard.net_profit_variance,
        },
        figures=visible_figures(request.figures, role),
    )


@router.post(
    "/sections",
    response_model=SectionsResponse,
    summary="Section breakdown",
    description="Section subtotals of a stored scorecard under the requested catalogue.",
)
async def section_breakdown(
    record: ScorecardRecordSchema,
    role: ScoreViewer,
    catalogue: CatalogueVariant = CatalogueVariant.FULL,
) -> SectionsResponse:
    """Section breakdown of a stored scorecard."""
    section_catalogue = get_catalogue(catalogue)
    sections = ScorecardService.section_scores(_to_record(record), section_catalogue)

    return SectionsResponse(
        catalogue=section_catalogue.variant,
        max_total=section_catalogue.max_total,
        sections=[
            SectionBreakdown(
                key=definition.key,
                label=definition.label,
                score=sections[definition.key].score,
                max_score=sections[definition.key].max_score,
                percent=sections[definition.key].percent,
            )
            for definition in section_catalogue.sections
        ],
    )


@router.post(
    "/trend",
    response_model=TrendResponse,
    summary="Score trend",
    description="Month-over-month movement between two total scores.",
)
async def score_trend(request: TrendRequest, role: ScoreViewer) -> TrendResponse:
    """Trend between two total scores; null without a previous score."""
    trend = TrendAnalyzer.compute_trend(request.current, request.previous)
    return TrendResponse(trend=trend.to_dict() if trend else None)


@router.post(
    "/analysis",
    response_model=BusinessAnalysisResponse,
    summary="Analyze a scorecard",
    description="Generate an AI analysis of one business's monthly scorecard.",
)
def analyze_scorecard(
    request: BusinessAnalysisRequest,
    role: ScoreViewer,
    ai_service: AnalysisService,
) -> BusinessAnalysisResponse:
    """
    Generate an AI analysis of a scorecard.

    Financial figures are withheld from the prompt for consultants.
    """
    record = _to_record(request.record)
    previous = _to_record(request.previous) if request.previous else None
    figures = FinancialFigures(**request.figures.model_dump()) if request.figures else None

    analysis = ai_service.generate_business_analysis(
        record=record,
        previous=previous,
        business_name=request.business_name or record.business_name or record.business_id,
        viewer_role=role,
        figures=figures,
    )
    return BusinessAnalysisResponse(analysis=analysis)


# =====================
# PORTFOLIO
# =====================

@portfolio_router.post(
    "/aggregate",
    response_model=PortfolioAggregateResponse,
    summary="Aggregate portfolio",
    description="Summarize the latest scorecard of every business in a portfolio.",
)
async def aggregate_portfolio(request: PortfolioRequest, role: ScoreViewer) -> PortfolioAggregateResponse:
    """Portfolio aggregate from stored scorecards."""
    aggregate = ScorecardService.build_portfolio_aggregate(
        [_to_record(r) for r in request.records],
        get_catalogue(request.catalogue),
    )
    return PortfolioAggregateResponse(**aggregate.to_dict())


@portfolio_router.post(
    "/analysis",
    response_model=PortfolioAnalysisResponse,
    summary="Analyze portfolio",
    description="Aggregate the portfolio (capped to the lowest-scoring businesses) and generate an AI analysis.",
)
def analyze_portfolio(
    request: PortfolioRequest,
    role: ScoreViewer,
    ai_service: AnalysisService,
) -> PortfolioAnalysisResponse:
    """
    Generate an AI analysis of the portfolio.

    The portfolio is capped before aggregation to bound the prompt size.
    """
    aggregate = ScorecardService.build_portfolio_aggregate(
        [_to_record(r) for r in request.records],
        get_catalogue(request.catalogue),
        limit=settings.portfolio_max_businesses,
    )
    analysis = ai_service.generate_portfolio_analysis(aggregate, viewer_role=role)

    return PortfolioAnalysisResponse(
        aggregate=PortfolioAggregateResponse(**aggregate.to_dict()),
        analysis=analysis,
    )


# =====================
# VISIBILITY
# =====================

@visibility_router.get(
    "/visibility",
    response_model=VisibilityResponse,
    summary="Visibility for role",
    description="What the requesting role may see.",
)
async def get_visibility(role: ViewerRole) -> VisibilityResponse:
    """Visibility decisions for the X-Viewer-Role header."""
    return VisibilityResponse(
        role=role,
        can_see_financials=can_see_financials(role),
        can_see_scores=can_see_scores(role),
        redact_figures=should_redact_figures(role),
    )
