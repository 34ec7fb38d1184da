"""
Visibility Gate
Role-based decisions about which figures a viewer may receive.

Consultants see scores but never the underlying monetary figures. The role
is always passed in explicitly and decisions are never cached, so the
same process can serve viewers with different roles concurrently.
"""

import logging
from enum import Enum
from typing import Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Role(str, Enum):
    """Viewer roles."""
    SUPER_ADMIN = "super_admin"
    CONSULTANT = "consultant"
    BUSINESS_USER = "business_user"


FINANCIAL_ROLES = frozenset({Role.SUPER_ADMIN, Role.BUSINESS_USER})
SCORE_ROLES = frozenset({Role.SUPER_ADMIN, Role.CONSULTANT, Role.BUSINESS_USER})


def parse_role(role: Optional[str]) -> Optional[Role]:
    """
    Convert a role string to a Role.

    Matching is exact and case-sensitive; anything else is unrecognized
    and returns None.
    """
    if role is None:
        return None
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        if role:
            logger.warning("Unrecognized viewer role %r", role)
        return None


def can_see_financials(role: Optional[str]) -> bool:
    """True only for super admins and business users."""
    return parse_role(role) in FINANCIAL_ROLES


def can_see_scores(role: Optional[str]) -> bool:
    """True for every recognized role."""
    return parse_role(role) in SCORE_ROLES


def should_redact_figures(role: Optional[str]) -> bool:
    """Whether figures must be withheld from the viewer and from AI prompts."""
    return not can_see_financials(role)


def visible_figures(figures: T, role: Optional[str]) -> Optional[T]:
    """Return the figures if the role may see them, otherwise None."""
    if can_see_financials(role):
        return figures
    return None
