"""
Admin panel service: content CRUD, user management and dashboard stats.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
import json
import logging
from sqlmodel import Session, select, func
from typing import Any, Dict, List, Optional, Tuple, Type

from yoruba.core.config import settings
from yoruba.core.exceptions import NotFoundError, ValidationError, AuthorizationError
from yoruba.models.models import (
    User,
    Trail,
    Level,
    Exercise,
    UserExercise,
    Transaction,
    UserRole,
    ExerciseType,
    TransactionStatus,
)
from yoruba.schemas.admin import (
    CreateTrailRequest,
    UpdateTrailRequest,
    CreateLevelRequest,
    UpdateLevelRequest,
    CreateExerciseRequest,
    UpdateExerciseRequest,
    AdminExerciseResponse,
    ExerciseOptionInput,
)
from yoruba.schemas.content import decode_exercise_content, encode_exercise_content
from yoruba.services.reward_service import DEFAULT_LEVEL_XP

logger = logging.getLogger(__name__)


def require_admin(session: Session, admin_id: int) -> User:
    """
    Raises:
        NotFoundError: Unknown user
        AuthorizationError: The user is not an admin
    """
    admin = session.get(User, admin_id)
    if not admin:
        raise NotFoundError(f"User with id {admin_id} not found")
    if not admin.is_admin:
        raise AuthorizationError("Admin access required")
    return admin


def paginate(session: Session, model: Type, page: int = 1, page_size: Optional[int] = None, order_by=None, where=None) -> Tuple[List[Any], int]:
    """Return (items of the 1-based page, total row count)."""
    page_size = page_size or settings.admin_page_size
    page = max(1, page)

    count_query = select(func.count()).select_from(model)
    query = select(model)
    if where is not None:
        count_query = count_query.where(where)
        query = query.where(where)
    total = session.exec(count_query).one()

    query = query.order_by(*(order_by if order_by is not None else [model.id]))
    items = session.exec(query.offset((page - 1) * page_size).limit(page_size)).all()
    return list(items), total


def _get_or_404(session: Session, model: Type, object_id: int, label: str):
    obj = session.get(model, object_id)
    if not obj:
        raise NotFoundError(f"{label} with id {object_id} not found")
    return obj


# --- Trails ---

def create_trail(session: Session, request: CreateTrailRequest) -> Trail:
    trail = Trail(
        name=request.name,
        theme=request.theme,
        order=request.order,
        is_active=request.is_active
    )
    session.add(trail)
    session.commit()
    session.refresh(trail)
    logger.info(f"Created trail {trail.id} ({trail.name})")
    return trail


def update_trail(session: Session, trail_id: int, request: UpdateTrailRequest) -> Trail:
    trail = _get_or_404(session, Trail, trail_id, "Trail")
    for field, value in request.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(trail, field, value)
    session.add(trail)
    session.commit()
    session.refresh(trail)
    return trail


def _clear_current_level_pointers(session: Session, level_ids: List[int]) -> None:
    if not level_ids:
        return
    users = session.exec(select(User).where(User.current_level_id.in_(level_ids))).all()
    for user in users:
        user.current_level_id = None
        session.add(user)


def delete_trail(session: Session, trail_id: int) -> None:
    """Delete a trail with its levels, exercises and progress on them."""
    trail = _get_or_404(session, Trail, trail_id, "Trail")
    _clear_current_level_pointers(session, [level.id for level in trail.levels])
    session.delete(trail)
    session.commit()
    logger.info(f"Deleted trail {trail_id}")


# --- Levels ---

def create_level(session: Session, request: CreateLevelRequest) -> Level:
    _get_or_404(session, Trail, request.trail_id, "Trail")
    level = Level(
        name=request.name,
        color=request.color,
        xp=request.xp if request.xp is not None else DEFAULT_LEVEL_XP[request.color],
        trail_id=request.trail_id,
        order=request.order
    )
    session.add(level)
    session.commit()
    session.refresh(level)
    logger.info(f"Created level {level.id} in trail {level.trail_id}")
    return level


def update_level(session: Session, level_id: int, request: UpdateLevelRequest) -> Level:
    level = _get_or_404(session, Level, level_id, "Level")
    updates = request.model_dump(exclude_unset=True)
    if updates.get("trail_id") is not None:
        _get_or_404(session, Trail, updates["trail_id"], "Trail")
    for field, value in updates.items():
        if value is not None:
            setattr(level, field, value)
    session.add(level)
    session.commit()
    session.refresh(level)
    return level


def delete_level(session: Session, level_id: int) -> None:
    """Delete a level with its exercises and progress; users pointing at it lose their current level."""
    level = _get_or_404(session, Level, level_id, "Level")
    _clear_current_level_pointers(session, [level.id])
    session.delete(level)
    session.commit()
    logger.info(f"Deleted level {level_id}")


# --- Exercises ---

def _validated_columns(
    exercise_type: ExerciseType,
    options: List[ExerciseOptionInput],
    correct_answer: Optional[str],
    audio_url: Optional[str]
) -> Dict[str, Any]:
    """Run the payload through the content variant and return the columns to store."""
    raw_options = json.dumps([option.model_dump(exclude_none=True) for option in options])
    content = decode_exercise_content(exercise_type, raw_options, correct_answer, audio_url)
    stored_type, stored_options, stored_answer, stored_audio = encode_exercise_content(content)
    return {
        "type": stored_type,
        "options": stored_options,
        "correct_answer": stored_answer,
        "audio_url": stored_audio,
    }


def exercise_to_admin_response(exercise: Exercise) -> AdminExerciseResponse:
    try:
        options = [ExerciseOptionInput(**option) for option in json.loads(exercise.options or "[]")]
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Exercise {exercise.id} has unreadable options: {e}")
        options = []
    return AdminExerciseResponse(
        id=exercise.id,
        question=exercise.question,
        type=exercise.type,
        options=options,
        correct_answer=exercise.correct_answer,
        audio_url=exercise.audio_url,
        level_id=exercise.level_id,
        created_at=exercise.created_at
    )


def create_exercise(session: Session, request: CreateExerciseRequest) -> Exercise:
    """
    Raises:
        NotFoundError: Unknown level
        ValidationError: Payload does not form a valid exercise of its type
    """
    _get_or_404(session, Level, request.level_id, "Level")
    columns = _validated_columns(request.type, request.options, request.correct_answer, request.audio_url)
    exercise = Exercise(question=request.question, level_id=request.level_id, **columns)
    session.add(exercise)
    session.commit()
    session.refresh(exercise)
    logger.info(f"Created {exercise.type.value} exercise {exercise.id} in level {exercise.level_id}")
    return exercise


def update_exercise(session: Session, exercise_id: int, request: UpdateExerciseRequest) -> Exercise:
    exercise = _get_or_404(session, Exercise, exercise_id, "Exercise")
    if request.level_id is not None:
        _get_or_404(session, Level, request.level_id, "Level")
        exercise.level_id = request.level_id
    if request.question is not None:
        exercise.question = request.question

    current = exercise_to_admin_response(exercise)
    columns = _validated_columns(
        request.type if request.type is not None else exercise.type,
        request.options if request.options is not None else current.options,
        request.correct_answer if request.correct_answer is not None else exercise.correct_answer,
        request.audio_url if request.audio_url is not None else exercise.audio_url
    )
    for field, value in columns.items():
        setattr(exercise, field, value)

    session.add(exercise)
    session.commit()
    session.refresh(exercise)
    return exercise


def delete_exercise(session: Session, exercise_id: int) -> None:
    exercise = _get_or_404(session, Exercise, exercise_id, "Exercise")
    session.delete(exercise)
    session.commit()
    logger.info(f"Deleted exercise {exercise_id}")


# --- Users ---

def toggle_admin(session: Session, admin_id: int, user_id: int) -> User:
    """Flip a user's role between user and admin."""
    if admin_id == user_id:
        raise ValidationError("Admins cannot change their own role")
    user = _get_or_404(session, User, user_id, "User")
    user.role = UserRole.USER if user.is_admin else UserRole.ADMIN
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Admin {admin_id} set role of user {user_id} to {user.role.value}")
    return user


# --- Dashboard ---

def get_admin_stats(session: Session, recent: int = 5) -> Dict[str, Any]:
    return {
        "users": session.exec(select(func.count(User.id))).one(),
        "trails": session.exec(select(func.count(Trail.id))).one(),
        "levels": session.exec(select(func.count(Level.id))).one(),
        "exercises": session.exec(select(func.count(Exercise.id))).one(),
        "total_xp": session.exec(select(func.coalesce(func.sum(User.xp), 0))).one(),
        "correct_answers": session.exec(
            select(func.count(UserExercise.id)).where(UserExercise.correct == True)  # noqa: E712
        ).one(),
        "completed_transactions": session.exec(
            select(func.count(Transaction.id)).where(Transaction.status == TransactionStatus.COMPLETED)
        ).one(),
        "recent_users": session.exec(
            select(User).order_by(User.created_at.desc(), User.id.desc()).limit(recent)
        ).all(),
        "recent_transactions": session.exec(
            select(Transaction).order_by(Transaction.created_at.desc(), Transaction.id.desc()).limit(recent)
        ).all(),
    }
