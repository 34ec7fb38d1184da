"""
Scoring Models
Plain data structures passed between the scoring components.

Score results are frozen: a new submission produces a new result and edits
recompute rather than mutate.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from scorecard_engine.scoring.constants import CatalogueVariant, MetricId, RagStatus
from scorecard_engine.scoring.options import (
    Leadership,
    MarketDemand,
    Marketing,
    ProductStrength,
    SalesExecution,
    SupplierStrength,
)


@dataclass(frozen=True)
class ScorecardInput:
    """
    Engine input for one monthly scorecard.

    Variances are signed percentages; None marks a metric as not applicable.
    """
    revenue_variance: Optional[float] = None
    gross_profit_variance: Optional[float] = None
    overheads_variance: Optional[float] = None
    net_profit_variance: Optional[float] = None
    productivity_benchmark: Optional[float] = None
    productivity_actual: Optional[float] = None
    leadership: Optional[Leadership] = None
    market_demand: Optional[MarketDemand] = None
    marketing: Optional[Marketing] = None
    product_strength: Optional[ProductStrength] = None
    supplier_strength: Optional[SupplierStrength] = None
    sales_execution: Optional[SalesExecution] = None


@dataclass(frozen=True)
class FinancialFigures:
    """Raw monetary figures behind the financial variances."""
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


@dataclass(frozen=True)
class MetricScore:
    """Points awarded for one metric."""
    metric_id: MetricId
    score: float
    max_score: float
    is_applicable: bool = True


@dataclass(frozen=True)
class SectionScore:
    """Section subtotal over applicable metrics."""
    score: float
    max_score: float
    catalogue: CatalogueVariant = CatalogueVariant.FULL

    @property
    def has_data(self) -> bool:
        return self.max_score > 0

    @property
    def percent(self) -> Optional[float]:
        """Percent of max, or None when the section has no data."""
        if not self.has_data:
            return None
        return (self.score / self.max_score) * 100

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "max_score": self.max_score}


@dataclass(frozen=True)
class ScoreResult:
    """Total score, RAG status and section breakdown for one scorecard."""
    section_subtotals: dict[str, SectionScore]
    total_score: int
    rag_status: RagStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_subtotals": {k: v.to_dict() for k, v in self.section_subtotals.items()},
            "total_score": self.total_score,
            "rag_status": self.rag_status.value,
        }


@dataclass(frozen=True)
class TrendResult:
    """Month-over-month movement of a business's total score."""
    direction: str  # "up", "down" or "same"
    change: int
    is_anomaly: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction,
            "change": self.change,
            "is_anomaly": self.is_anomaly,
        }


@dataclass(frozen=True)
class ScorecardRecord:
    """
    A persisted scorecard as read back from storage.

    Categorical fields hold the raw stored strings; they are validated
    against the option enums when mapped back into a ScorecardInput.
    """
    business_id: str
    month: str  # YYYY-MM
    total_score: int
    rag_status: str
    business_name: str = ""
    consultant_name: str = ""
    revenue_variance: Optional[float] = None
    gross_profit_variance: Optional[float] = None
    overheads_variance: Optional[float] = None
    net_profit_variance: Optional[float] = None
    productivity_benchmark: Optional[float] = None
    productivity_actual: Optional[float] = None
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


@dataclass(frozen=True)
class BusinessSummary:
    """Latest score and trend for one business, input to the portfolio aggregate."""
    business_id: str
    business_name: str
    latest_score: int
    rag_status: RagStatus
    month: str
    trend: Optional[TrendResult] = None
    top_risk: str = ""
    top_opportunity: str = ""

    @property
    def is_anomaly(self) -> bool:
        return self.trend is not None and self.trend.is_anomaly


@dataclass(frozen=True)
class WeakSection:
    """Portfolio-wide performance of one section."""
    section: str
    avg_score: float
    percent_of_max: float
    businesses_below_50_pct: int


@dataclass(frozen=True)
class Anomaly:
    """A business whose score dropped by at least the anomaly threshold."""
    business_name: str
    score_change: int
    current_score: int
    rag_status: RagStatus


@dataclass(frozen=True)
class BusinessCapsule:
    """Condensed per-business summary for downstream analysis."""
    name: str
    score: int
    rag: RagStatus
    trend: Optional[str]
    trend_change: Optional[int]
    top_risk: str
    top_opportunity: str
    weakest_section: Optional[str]


@dataclass(frozen=True)
class PortfolioAggregate:
    """Read-only cross-business summary. Built fresh on every request."""
    total_businesses: int
    analysis_month: Optional[str]
    distribution: dict[str, int]
    average_score: int
    score_range: dict[str, int]
    weakest_sections: list[WeakSection] = field(default_factory=list)
    anomalies: list[Anomaly] = field(default_factory=list)
    businesses: list[BusinessCapsule] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_businesses": self.total_businesses,
            "analysis_month": self.analysis_month,
            "distribution": dict(self.distribution),
            "average_score": self.average_score,
            "score_range": dict(self.score_range),
            "weakest_sections": [
                {
                    "section": s.section,
                    "avg_score": s.avg_score,
                    "percent_of_max": s.percent_of_max,
                    "businesses_below_50_pct": s.businesses_below_50_pct,
                }
                for s in self.weakest_sections
            ],
            "anomalies": [
                {
                    "business_name": a.business_name,
                    "score_change": a.score_change,
                    "current_score": a.current_score,
                    "rag_status": a.rag_status.value,
                }
                for a in self.anomalies
            ],
            "businesses": [
                {
                    "name": b.name,
                    "score": b.score,
                    "rag": b.rag.value,
                    "trend": b.trend,
                    "trend_change": b.trend_change,
                    "top_risk": b.top_risk,
                    "top_opportunity": b.top_opportunity,
                    "weakest_section": b.weakest_section,
                }
                for b in self.businesses
            ],
        }
