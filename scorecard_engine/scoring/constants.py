"""
Scoring Constants
Tier boundaries, RAG bands, the anomaly threshold and the section catalogues.

Every threshold used by the scoring engine is defined here so tests can
assert against the named values directly.

Full catalogue (100 points):
- Financial: 40 (revenue, gross profit, overheads, net profit at 10 each)
- People: 20 (productivity 10 + leadership 10)
- Market: 15 (demand 7.5 + marketing 7.5)
- Product: 10
- Suppliers: 5
- Sales: 10

Chart-display catalogue (70 points) drops gross profit, overheads and
productivity. Percentages computed against one catalogue must never be
compared with percentages from the other.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# =====================
# VARIANCE TIERS
# =====================
# (lower_bound, points) in descending order. The first tier whose bound is
# <= the variance wins; anything below the last bound scores 0.

FINANCIAL_VARIANCE_TIERS: tuple[tuple[float, int], ...] = (
    (10, 10),   # >= +10%
    (5, 8),     # +5% to +9.9%
    (-4, 6),    # -4% to +4.9% (meets target)
    (-9, 3),    # -9% to -4.1%
)

PRODUCTIVITY_VARIANCE_TIERS: tuple[tuple[float, int], ...] = (
    (15, 10),   # >= +15%
    (5, 8),     # +5% to +14.9%
    (-4, 6),    # -4% to +4.9% (meets benchmark)
    (-14, 3),   # -14% to -4.1%
)

MEETS_TARGET_POINTS = 6
VARIANCE_FLOOR_POINTS = 0
VARIANCE_MAX_POINTS = 10

# Variances are clamped into this range before scoring
VARIANCE_CLAMP_MIN = -100.0
VARIANCE_CLAMP_MAX = 100.0


# =====================
# RAG BANDS
# =====================

GREEN_THRESHOLD = 75
AMBER_THRESHOLD = 60

MAX_TOTAL_SCORE = 100


# =====================
# TRENDS
# =====================

# A month-over-month change at or below this is an anomaly
ANOMALY_THRESHOLD = -10


# =====================
# PORTFOLIO
# =====================

# Businesses below this fraction of a section's max are counted as weak
SECTION_WEAKNESS_FRACTION = 0.5

UNSPECIFIED_TEXT = "Not specified"


class RagStatus(str, Enum):
    """Red/amber/green classification of a total score."""
    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class Polarity(str, Enum):
    """Direction in which a variance is good."""
    HIGHER_IS_BETTER = "higher-is-better"
    LOWER_IS_BETTER = "lower-is-better"


class CatalogueVariant(str, Enum):
    """Named section catalogue variants."""
    FULL = "full"
    CHART_DISPLAY = "chart_display"


class MetricId(str, Enum):
    """Identifiers of every scored metric."""
    REVENUE = "revenue"
    GROSS_PROFIT = "gross_profit"
    OVERHEADS = "overheads"
    NET_PROFIT = "net_profit"
    PRODUCTIVITY = "productivity"
    LEADERSHIP = "leadership"
    MARKET_DEMAND = "market_demand"
    MARKETING = "marketing"
    PRODUCT_STRENGTH = "product_strength"
    SUPPLIER_STRENGTH = "supplier_strength"
    SALES_EXECUTION = "sales_execution"


@dataclass(frozen=True)
class MetricDefinition:
    """A single scored metric within a section."""
    metric_id: MetricId
    label: str
    max_points: float


@dataclass(frozen=True)
class SectionDefinition:
    """A named group of metrics with its point budget."""
    key: str
    label: str
    metrics: tuple[MetricDefinition, ...]

    @property
    def max_score(self) -> float:
        return sum(m.max_points for m in self.metrics)

    @property
    def metric_ids(self) -> tuple[MetricId, ...]:
        return tuple(m.metric_id for m in self.metrics)


@dataclass(frozen=True)
class SectionCatalogue:
    """An ordered set of the six sections under one named variant."""
    variant: CatalogueVariant
    sections: tuple[SectionDefinition, ...] = field(default_factory=tuple)

    @property
    def max_total(self) -> float:
        return sum(s.max_score for s in self.sections)

    @property
    def section_keys(self) -> tuple[str, ...]:
        return tuple(s.key for s in self.sections)

    def get(self, key: str) -> Optional[SectionDefinition]:
        for section in self.sections:
            if section.key == key:
                return section
        return None


_REVENUE = MetricDefinition(MetricId.REVENUE, "Revenue vs Target", 10)
_GROSS_PROFIT = MetricDefinition(MetricId.GROSS_PROFIT, "Gross Profit vs Target", 10)
_OVERHEADS = MetricDefinition(MetricId.OVERHEADS, "Overheads vs Budget", 10)
_NET_PROFIT = MetricDefinition(MetricId.NET_PROFIT, "Net Profit vs Target", 10)
_PRODUCTIVITY = MetricDefinition(MetricId.PRODUCTIVITY, "Productivity vs Benchmark", 10)
_LEADERSHIP = MetricDefinition(MetricId.LEADERSHIP, "Leadership / Alignment", 10)
_MARKET_DEMAND = MetricDefinition(MetricId.MARKET_DEMAND, "Market Demand", 7.5)
_MARKETING = MetricDefinition(MetricId.MARKETING, "Marketing Effectiveness", 7.5)
_PRODUCT = MetricDefinition(MetricId.PRODUCT_STRENGTH, "Product/Service Strength", 10)
_SUPPLIERS = MetricDefinition(MetricId.SUPPLIER_STRENGTH, "Suppliers/Purchasing Strength", 5)
_SALES = MetricDefinition(MetricId.SALES_EXECUTION, "Sales Execution", 10)

_MARKET_SECTION = SectionDefinition("market", "Market", (_MARKET_DEMAND, _MARKETING))
_PRODUCT_SECTION = SectionDefinition("product", "Product", (_PRODUCT,))
_SUPPLIERS_SECTION = SectionDefinition("suppliers", "Suppliers", (_SUPPLIERS,))
_SALES_SECTION = SectionDefinition("sales", "Sales", (_SALES,))

FULL_CATALOGUE = SectionCatalogue(
    variant=CatalogueVariant.FULL,
    sections=(
        SectionDefinition("financial", "Financial", (_REVENUE, _GROSS_PROFIT, _OVERHEADS, _NET_PROFIT)),
        SectionDefinition("people", "People", (_PRODUCTIVITY, _LEADERSHIP)),
        _MARKET_SECTION,
        _PRODUCT_SECTION,
        _SUPPLIERS_SECTION,
        _SALES_SECTION,
    ),
)

CHART_DISPLAY_CATALOGUE = SectionCatalogue(
    variant=CatalogueVariant.CHART_DISPLAY,
    sections=(
        SectionDefinition("financial", "Financial", (_REVENUE, _NET_PROFIT)),
        SectionDefinition("people", "People", (_LEADERSHIP,)),
        _MARKET_SECTION,
        _PRODUCT_SECTION,
        _SUPPLIERS_SECTION,
        _SALES_SECTION,
    ),
)

CATALOGUES: dict[CatalogueVariant, SectionCatalogue] = {
    CatalogueVariant.FULL: FULL_CATALOGUE,
    CatalogueVariant.CHART_DISPLAY: CHART_DISPLAY_CATALOGUE,
}


def get_catalogue(variant: CatalogueVariant) -> SectionCatalogue:
    """Look up a section catalogue by variant."""
    return CATALOGUES[CatalogueVariant(variant)]
