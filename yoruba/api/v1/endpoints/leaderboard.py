"""
Leaderboard endpoint.
"""
from fastapi import APIRouter, Depends, Query

from yoruba.api.v1.endpoints.dependencies import get_content_repository, get_progress_store
from yoruba.core.config import settings
from yoruba.models.enums import LeaderboardRange
from yoruba.repositories.sql import SqlContentRepository, SqlProgressStore
from yoruba.schemas.leaderboard import LeaderboardEntryResponse, LeaderboardResponse
from yoruba.services.leaderboard_service import get_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def leaderboard(
    time_range: LeaderboardRange = Query(LeaderboardRange.WEEKLY, alias="timeRange"),
    content: SqlContentRepository = Depends(get_content_repository),
    progress: SqlProgressStore = Depends(get_progress_store)
):
    """Ranked users for the week (XP of correctly answered exercises' levels) or all time (total XP)."""
    entries = get_leaderboard(content, progress, time_range, limit=settings.leaderboard_limit)
    return LeaderboardResponse(
        time_range=time_range,
        entries=[LeaderboardEntryResponse.model_validate(entry) for entry in entries]
    )
