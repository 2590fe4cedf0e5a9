"""
User profile endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from yoruba.api.v1.endpoints.dependencies import get_engine
from yoruba.core.config import settings
from yoruba.core.database import get_session
from yoruba.schemas.auth import UserResponse, UserStatsResponse
from yoruba.services.progression_service import ProgressionEngine
from yoruba.services.user_service import get_user, get_user_stats

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: int,
    session: Session = Depends(get_session),
    engine: ProgressionEngine = Depends(get_engine)
):
    """Current user with lives regenerated up to now."""
    engine.refresh_lives(user_id)
    user = get_user(session, user_id)
    session.refresh(user)
    response = UserResponse.model_validate(user)
    response.max_lives = settings.max_lives
    return response


@router.get("/stats", response_model=UserStatsResponse)
async def get_stats(
    user_id: int,
    session: Session = Depends(get_session),
    engine: ProgressionEngine = Depends(get_engine)
):
    """Profile statistics."""
    engine.refresh_lives(user_id)
    return UserStatsResponse(**get_user_stats(session, user_id))
