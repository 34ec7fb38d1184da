"""
Scorecard Dependencies
FastAPI dependencies for viewer role handling.

Authentication happens upstream; the verified role arrives in the
X-Viewer-Role header and is passed explicitly into every visibility check.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, status

from scorecard_engine.analysis.ai_analysis_service import AIAnalysisService
from scorecard_engine.core.errors import ErrorCode, create_error_response
from scorecard_engine.scoring.visibility import can_see_scores


async def get_viewer_role(
    x_viewer_role: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """Dependency that returns the requesting viewer's role, if any."""
    return x_viewer_role


async def require_score_access(
    role: Annotated[Optional[str], Depends(get_viewer_role)],
) -> Optional[str]:
    """
    Dependency that rejects viewers who may not see scores.

    Raises:
        HTTPException: 403 if the role is missing or unrecognized
    """
    if not can_see_scores(role):
        raise create_error_response(ErrorCode.FORBIDDEN)
    return role


def get_analysis_service() -> AIAnalysisService:
    """
    Dependency that builds the AI analysis service.

    Raises:
        HTTPException: 503 if OpenAI is not configured
    """
    try:
        return AIAnalysisService()
    except ValueError:
        raise create_error_response(
            ErrorCode.SERVICE_UNAVAILABLE,
            http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


# Type aliases for cleaner route signatures
ViewerRole = Annotated[Optional[str], Depends(get_viewer_role)]
ScoreViewer = Annotated[Optional[str], Depends(require_score_access)]
AnalysisService = Annotated[AIAnalysisService, Depends(get_analysis_service)]
