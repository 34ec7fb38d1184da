"""
Scorecard Schemas
Pydantic models for scoring and portfolio API requests and responses.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from scorecard_engine.analysis.schemas import BusinessAnalysis, PortfolioAnalysis
from scorecard_engine.scoring.constants import CatalogueVariant, RagStatus
from scorecard_engine.scoring.options import (
    Leadership,
    MarketDemand,
    Marketing,
    ProductStrength,
    SalesExecution,
    SupplierStrength,
)


# =====================
# REQUESTS
# =====================

class QualitativeRatings(BaseModel):
    """Qualitative metric ratings; omitted ratings are not applicable."""

    leadership: Optional[Leadership] = Field(None, description="Leadership / alignment rating")
    market_demand: Optional[MarketDemand] = Field(None, description="Market demand rating")
    marketing: Optional[Marketing] = Field(None, description="Marketing effectiveness rating")
    product_strength: Optional[ProductStrength] = Field(None, description="Product/service strength rating")
    supplier_strength: Optional[SupplierStrength] = Field(None, description="Supplier/purchasing strength rating")
    sales_execution: Optional[SalesExecution] = Field(None, description="Sales execution rating")


class ScoreRequest(QualitativeRatings):
    """Scorecard input expressed as variances and ratings."""

    revenue_variance: Optional[float] = Field(None, description="Revenue vs target, percent")
    gross_profit_variance: Optional[float] = Field(None, description="Gross profit vs target, percent")
    overheads_variance: Optional[float] = Field(None, description="Overheads vs budget, percent")
    net_profit_variance: Optional[float] = Field(None, description="Net profit vs target, percent")
    productivity_benchmark: Optional[float] = Field(None, description="Benchmark GP/wages ratio")
    productivity_actual: Optional[float] = Field(None, description="Actual GP/wages ratio")


class FinancialFiguresSchema(BaseModel):
    """Raw monetary figures with N/A flags."""

    revenue_actual: Optional[float] = None
    revenue_target: Optional[float] = None
    gross_profit_actual: Optional[float] = None
    gross_profit_target: Optional[float] = None
    overheads_actual: Optional[float] = None
    overheads_budget: Optional[float] = None
    net_profit_actual: Optional[float] = None
    net_profit_target: Optional[float] = None
    total_wages: Optional[float] = None
    productivity_benchmark: Optional[float] = None
    revenue_na: bool = False
    gross_profit_na: bool = False
    overheads_na: bool = False
    wages_na: bool = False


class SubmissionRequest(BaseModel):
    """A monthly submission: raw figures plus qualitative ratings."""

    figures: FinancialFiguresSchema = Field(..., description="Raw financial figures")
    ratings: QualitativeRatings = Field(default_factory=QualitativeRatings, description="Qualitative ratings")


class ScorecardRecordSchema(BaseModel):
    """
    A stored scorecard.

    Stored values are taken as-is; malformed numbers and unknown options
    are treated as not applicable during scoring.
    """

    business_id: str
    month: str = Field(..., description="Reporting month, YYYY-MM")
    total_score: int
    rag_status: str = ""
    business_name: str = ""
    consultant_name: str = ""
    revenue_variance: Optional[Union[float, str]] = None
    gross_profit_variance: Optional[Union[float, str]] = None
    overheads_variance: Optional[Union[float, str]] = None
    net_profit_variance: Optional[Union[float, str]] = None
    productivity_benchmark: Optional[Union[float, str]] = None
    productivity_actual: Optional[Union[float, str]] = None
    leadership: Optional[str] = None
    market_demand: Optional[str] = None
    marketing: Optional[str] = None
    product_strength: Optional[str] = None
    supplier_strength: Optional[str] = None
    sales_execution: Optional[str] = None
    biggest_opportunity: str = ""
    biggest_risk: str = ""
    management_avoiding: str = ""
    leadership_confidence: Optional[str] = None
    consultant_gut_feel: str = ""


class TrendRequest(BaseModel):
    """Two consecutive total scores."""

    current: int = Field(..., description="This month's total score")
    previous: Optional[int] = Field(None, description="Prior month's total score")


class PortfolioRequest(BaseModel):
    """Stored scorecards across a portfolio."""

    records: list[ScorecardRecordSchema] = Field(default_factory=list)
    catalogue: CatalogueVariant = Field(CatalogueVariant.FULL, description="Section catalogue for breakdowns")


class BusinessAnalysisRequest(BaseModel):
    """A scorecard to analyze, with optional prior month and figures."""

    record: ScorecardRecordSchema
    previous: Optional[ScorecardRecordSchema] = None
    business_name: Optional[str] = None
    figures: Optional[FinancialFiguresSchema] = None


# =====================
# RESPONSES
# =====================

class SectionScoreSchema(BaseModel):
    """Section subtotal over applicable metrics."""

    score: float
    max_score: float


class ScoreResponse(BaseModel):
    """Total score, RAG status and section breakdown."""

    section_subtotals: dict[str, SectionScoreSchema]
    total_score: int = Field(..., description="Total score, 0-100")
    rag_status: RagStatus


class SubmissionScoreResponse(ScoreResponse):
    """Score of a raw submission plus the derived variances."""

    variances: dict[str, Optional[float]] = Field(..., description="Derived variances; None when N/A")
    figures: Optional[FinancialFiguresSchema] = Field(
        None, description="Submitted figures, omitted for roles that may not see them"
    )


class SectionBreakdown(BaseModel):
    """One section of a catalogue breakdown."""

    key: str
    label: str
    score: float
    max_score: float
    percent: Optional[float] = Field(None, description="Percent of max; None when the section has no data")


class SectionsResponse(BaseModel):
    """Section breakdown of a stored scorecard."""

    catalogue: CatalogueVariant
    max_total: float
    sections: list[SectionBreakdown]


class TrendSchema(BaseModel):
    direction: Literal["up", "down", "same"]
    change: int
    is_anomaly: bool


class TrendResponse(BaseModel):
    """Month-over-month movement; trend is None without a previous score."""

    trend: Optional[TrendSchema] = None


class WeakSectionSchema(BaseModel):
    section: str
    avg_score: float
    percent_of_max: float
    businesses_below_50_pct: int


class AnomalySchema(BaseModel):
    business_name: str
    score_change: int
    current_score: int
    rag_status: RagStatus


class BusinessCapsuleSchema(BaseModel):
    name: str
    score: int
    rag: RagStatus
    trend: Optional[str] = None
    trend_change: Optional[int] = None
    top_risk: str
    top_opportunity: str
    weakest_section: Optional[str] = None


class PortfolioAggregateResponse(BaseModel):
    """Cross-business portfolio summary."""

    total_businesses: int
    analysis_month: Optional[str] = None
    distribution: dict[str, int]
    average_score: int
    score_range: dict[str, int]
    weakest_sections: list[WeakSectionSchema]
    anomalies: list[AnomalySchema]
    businesses: list[BusinessCapsuleSchema]


class PortfolioAnalysisResponse(BaseModel):
    """Capped portfolio aggregate and its AI analysis."""

    aggregate: PortfolioAggregateResponse
    analysis: PortfolioAnalysis


class BusinessAnalysisResponse(BaseModel):
    """AI analysis of one scorecard."""

    analysis: BusinessAnalysis


class VisibilityResponse(BaseModel):
    """Visibility decisions for the requesting role."""

    role: Optional[str] = None
    can_see_financials: bool
    can_see_scores: bool
    redact_figures: bool
