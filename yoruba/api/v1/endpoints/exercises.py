"""
Exercise endpoints: level entry, answer submission and level listing.
"""
import logging
from fastapi import APIRouter, Depends

from yoruba.api.v1.endpoints.dependencies import get_content_repository, get_engine
from yoruba.core.exceptions import NotFoundError
from yoruba.repositories.sql import SqlContentRepository
from yoruba.schemas.exercise import (
    PublicExercise,
    ExercisesResponse,
    StartLevelRequest,
    StartLevelResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from yoruba.services.answer_service import check_answer
from yoruba.services.progression_service import ProgressionEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("", response_model=ExercisesResponse)
async def get_level_exercises(
    level_id: int,
    content: SqlContentRepository = Depends(get_content_repository)
):
    """All exercises of a level, without answer keys."""
    if not content.get_level(level_id):
        raise NotFoundError(f"Level with id {level_id} not found")
    exercises = content.get_exercises_by_level(level_id)
    return ExercisesResponse(
        level_id=level_id,
        exercises=[PublicExercise.from_record(exercise) for exercise in exercises]
    )


@router.post("/start", response_model=StartLevelResponse)
async def start_level(
    request: StartLevelRequest,
    engine: ProgressionEngine = Depends(get_engine)
):
    """Enter a level and get its next unattempted exercise (or its completion)."""
    entry = engine.start_or_resume_level(request.user_id, request.level_id)
    response = StartLevelResponse(
        level_id=entry.level_id,
        exercise=PublicExercise.from_record(entry.exercise) if entry.exercise else None,
        progress=entry.attempted_count,
        total_exercises=entry.total_count,
        level_completed=entry.level_completed,
        all_exercises_done=entry.all_exercises_done
    )
    if entry.reward:
        response.xp_earned = entry.reward.xp_earned
        response.diamonds_earned = entry.reward.diamonds_earned
        response.next_level_id = entry.reward.next_level_id
    return response


@router.post("/progress", response_model=SubmitAnswerResponse)
async def submit_answer(
    request: SubmitAnswerRequest,
    engine: ProgressionEngine = Depends(get_engine)
):
    """
    Record an answer.

    When ``correct`` is omitted the answer is checked server side from
    ``option_id`` or ``answer``.
    """
    correct = request.correct
    if correct is None:
        exercise = engine.content.get_exercise(request.exercise_id)
        if not exercise:
            raise NotFoundError(f"Exercise with id {request.exercise_id} not found")
        correct = check_answer(exercise.content, option_id=request.option_id, answer=request.answer)

    result = engine.submit_answer(request.user_id, request.level_id, request.exercise_id, correct)
    response = SubmitAnswerResponse(
        correct=result.correct,
        level_completed=result.level_completed,
        all_exercises_done=result.all_exercises_done,
        next_exercise=PublicExercise.from_record(result.next_exercise) if result.next_exercise else None,
        progress=result.attempted_count,
        total_exercises=result.total_count,
        lives=result.lives,
        next_life_at=result.next_life_at,
        out_of_lives=result.out_of_lives
    )
    if result.reward:
        response.xp_earned = result.reward.xp_earned
        response.diamonds_earned = result.reward.diamonds_earned
        response.next_level_id = result.reward.next_level_id
    return response
