"""
Categorical Metric Options
Closed option sets for the qualitative metrics and their point tables.

Each metric is its own Enum so an option for one metric cannot be passed
where another is expected. Stored string values re-enter the engine through
parse_option(), which logs and drops anything outside the enumeration.
"""

import logging
from enum import Enum
from typing import Optional, TypeVar

logger = logging.getLogger(__name__)


class Leadership(str, Enum):
    """Leadership / Alignment Index (0-10 points)."""
    ALIGNED = "aligned"
    MINOR = "minor"
    MISALIGNED = "misaligned"
    TOXIC = "toxic"
    NOT_APPLICABLE = "na"  # Solo operators with no leadership team


class MarketDemand(str, Enum):
    """Market Demand Index (0-7.5 points)."""
    STRONG = "strong"
    FLAT = "flat"
    SOFTENING = "softening"
    DECLINE = "decline"


class Marketing(str, Enum):
    """Marketing Effectiveness Index (0-7.5 points)."""
    CLEAR = "clear"
    ACTIVITY = "activity"
    POOR = "poor"
    NONE = "none"


class ProductStrength(str, Enum):
    """Product/Service Strength (0-10 points)."""
    DIFFERENTIATED = "differentiated"
    ADEQUATE = "adequate"
    WEAK = "weak"
    BROKEN = "broken"


class SupplierStrength(str, Enum):
    """Suppliers/Purchasing Strength (0-5 points)."""
    STRONG = "strong"
    ACCEPTABLE = "acceptable"
    WEAK = "weak"
    DAMAGING = "damaging"


class SalesExecution(str, Enum):
    """Sales Execution (0-10 points)."""
    BEATING = "beating"
    ON_TARGET = "onTarget"
    UNDERPERFORMING = "underperforming"
    NONE = "none"


class LeadershipConfidence(str, Enum):
    """Consultant's confidence in leadership (commentary only, not scored)."""
    YES = "yes"
    MAYBE = "maybe"
    NO = "no"


# Options absent from a points table are "not applicable" and excluded
LEADERSHIP_SCORES: dict[Leadership, float] = {
    Leadership.ALIGNED: 10,
    Leadership.MINOR: 7,
    Leadership.MISALIGNED: 3,
    Leadership.TOXIC: 0,
}

MARKET_DEMAND_SCORES: dict[MarketDemand, float] = {
    MarketDemand.STRONG: 7.5,
    MarketDemand.FLAT: 5,
    MarketDemand.SOFTENING: 2.5,
    MarketDemand.DECLINE: 0,
}

MARKETING_SCORES: dict[Marketing, float] = {
    Marketing.CLEAR: 7.5,
    Marketing.ACTIVITY: 5,
    Marketing.POOR: 2.5,
    Marketing.NONE: 0,
}

PRODUCT_SCORES: dict[ProductStrength, float] = {
    ProductStrength.DIFFERENTIATED: 10,
    ProductStrength.ADEQUATE: 6,
    ProductStrength.WEAK: 3,
    ProductStrength.BROKEN: 0,
}

SUPPLIER_SCORES: dict[SupplierStrength, float] = {
    SupplierStrength.STRONG: 5,
    SupplierStrength.ACCEPTABLE: 3,
    SupplierStrength.WEAK: 1,
    SupplierStrength.DAMAGING: 0,
}

SALES_SCORES: dict[SalesExecution, float] = {
    SalesExecution.BEATING: 10,
    SalesExecution.ON_TARGET: 6,
    SalesExecution.UNDERPERFORMING: 3,
    SalesExecution.NONE: 0,
}

OPTION_LABELS: dict[Enum, str] = {
    Leadership.ALIGNED: "Fully aligned, accountable leadership",
    Leadership.MINOR: "Minor issues, not performance limiting",
    Leadership.MISALIGNED: "Clear misalignment affecting output",
    Leadership.TOXIC: "Toxic / blocking progress",
    Leadership.NOT_APPLICABLE: "Not applicable (no leadership team)",
    MarketDemand.STRONG: "Strong demand / positive momentum",
    MarketDemand.FLAT: "Flat / mixed signals",
    MarketDemand.SOFTENING: "Softening / pressure on pricing",
    MarketDemand.DECLINE: "Clear decline",
    Marketing.CLEAR: "Clear strategy, measurable ROI",
    Marketing.ACTIVITY: "Activity but weak focus",
    Marketing.POOR: "Poor execution / no traction",
    Marketing.NONE: "No meaningful marketing",
    ProductStrength.DIFFERENTIATED: "Differentiated, margin-positive, scalable",
    ProductStrength.ADEQUATE: "Adequate but undifferentiated",
    ProductStrength.WEAK: "Weak / price-led / delivery issues",
    ProductStrength.BROKEN: "Fundamentally broken",
    SupplierStrength.STRONG: "Strong suppliers, pricing power",
    SupplierStrength.ACCEPTABLE: "Acceptable, no leverage",
    SupplierStrength.WEAK: "Weak suppliers / margin drag",
    SupplierStrength.DAMAGING: "Actively damaging",
    SalesExecution.BEATING: "Beating targets / strong pipeline",
    SalesExecution.ON_TARGET: "On target / inconsistent performers",
    SalesExecution.UNDERPERFORMING: "Underperforming / weak management",
    SalesExecution.NONE: "No effective sales engine",
}

E = TypeVar("E", bound=Enum)


def parse_option(enum_cls: type[E], value: object, field_name: str = "") -> Optional[E]:
    """
    Validate a stored categorical value against its enumeration.

    Unrecognised values are logged and treated as unspecified rather than
    raised, so one bad field never blocks scoring the rest of a scorecard.

    Args:
        enum_cls: Option enum for the metric
        value: Raw stored value (string, enum member or None)
        field_name: Field name used in the warning

    Returns:
        Enum member, or None if the value is missing or invalid
    """
    if value is None or value == "":
        return None

    if isinstance(value, enum_cls):
        return value

    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(
            "Invalid %s value %r. Treating as unspecified.",
            field_name or enum_cls.__name__,
            value,
        )
        return None


def option_points(table: dict[E, float], option: Optional[E]) -> Optional[float]:
    """Points for an option, or None when it is absent or not applicable."""
    if option is None:
        return None
    return table.get(option)


def option_label(option: Optional[Enum]) -> str:
    """Human-readable label for an option, used in analysis prompts."""
    if option is None:
        return "Not rated"
    return OPTION_LABELS.get(option, str(option.value))
