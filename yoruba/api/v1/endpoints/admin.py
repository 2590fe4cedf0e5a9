"""
Admin panel endpoints. Every route takes the acting admin's id and checks the role.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional

from yoruba.core.config import settings
from yoruba.core.database import get_session
from yoruba.core.exceptions import NotFoundError, ValidationError
from yoruba.models.models import Trail, Level, Exercise, User, Transaction
from yoruba.schemas.admin import (
    TrailResponse,
    CreateTrailRequest,
    UpdateTrailRequest,
    TrailsPage,
    LevelResponse,
    CreateLevelRequest,
    UpdateLevelRequest,
    LevelsPage,
    AdminExerciseResponse,
    CreateExerciseRequest,
    UpdateExerciseRequest,
    ExercisesPage,
    AdminUserResponse,
    UsersPage,
    TransactionResponse,
    TransactionsPage,
    AdminStatsResponse,
)
from yoruba.services import admin_service
from yoruba.services.user_service import delete_user

router = APIRouter(prefix="/admin", tags=["admin"])


def _page_size(page_size: Optional[int]) -> int:
    return page_size or settings.admin_page_size


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(admin_id: int, session: Session = Depends(get_session)):
    """Dashboard counts with the most recent users and transactions."""
    admin_service.require_admin(session, admin_id)
    stats = admin_service.get_admin_stats(session)
    stats["recent_users"] = [AdminUserResponse.model_validate(user) for user in stats["recent_users"]]
    stats["recent_transactions"] = [
        TransactionResponse.model_validate(transaction) for transaction in stats["recent_transactions"]
    ]
    return AdminStatsResponse(**stats)


# --- Trails ---

@router.get("/trails", response_model=TrailsPage)
async def list_trails(
    admin_id: int,
    page: int = 1,
    page_size: Optional[int] = None,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    size = _page_size(page_size)
    trails, total = admin_service.paginate(session, Trail, page, size, order_by=[Trail.order, Trail.id])
    return TrailsPage(
        items=[TrailResponse.model_validate(trail) for trail in trails],
        total=total,
        page=page,
        page_size=size
    )


@router.get("/trails/{trail_id}", response_model=TrailResponse)
async def get_trail(trail_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    trail = session.get(Trail, trail_id)
    if not trail:
        raise NotFoundError(f"Trail with id {trail_id} not found")
    return TrailResponse.model_validate(trail)


@router.post("/trails", response_model=TrailResponse, status_code=status.HTTP_201_CREATED)
async def create_trail(admin_id: int, request: CreateTrailRequest, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    return TrailResponse.model_validate(admin_service.create_trail(session, request))


@router.patch("/trails/{trail_id}", response_model=TrailResponse)
async def update_trail(
    trail_id: int,
    admin_id: int,
    request: UpdateTrailRequest,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    return TrailResponse.model_validate(admin_service.update_trail(session, trail_id, request))


@router.delete("/trails/{trail_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trail(trail_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    admin_service.delete_trail(session, trail_id)


# --- Levels ---

@router.get("/levels", response_model=LevelsPage)
async def list_levels(
    admin_id: int,
    trail_id: Optional[int] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    size = _page_size(page_size)
    levels, total = admin_service.paginate(
        session, Level, page, size,
        order_by=[Level.trail_id, Level.order, Level.id],
        where=(Level.trail_id == trail_id) if trail_id is not None else None
    )
    return LevelsPage(
        items=[LevelResponse.model_validate(level) for level in levels],
        total=total,
        page=page,
        page_size=size
    )


@router.get("/levels/{level_id}", response_model=LevelResponse)
async def get_level(level_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    level = session.get(Level, level_id)
    if not level:
        raise NotFoundError(f"Level with id {level_id} not found")
    return LevelResponse.model_validate(level)


@router.post("/levels", response_model=LevelResponse, status_code=status.HTTP_201_CREATED)
async def create_level(admin_id: int, request: CreateLevelRequest, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    return LevelResponse.model_validate(admin_service.create_level(session, request))


@router.patch("/levels/{level_id}", response_model=LevelResponse)
async def update_level(
    level_id: int,
    admin_id: int,
    request: UpdateLevelRequest,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    return LevelResponse.model_validate(admin_service.update_level(session, level_id, request))


@router.delete("/levels/{level_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_level(level_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    admin_service.delete_level(session, level_id)


# --- Exercises ---

@router.get("/exercises", response_model=ExercisesPage)
async def list_exercises(
    admin_id: int,
    level_id: Optional[int] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    size = _page_size(page_size)
    exercises, total = admin_service.paginate(
        session, Exercise, page, size,
        where=(Exercise.level_id == level_id) if level_id is not None else None
    )
    return ExercisesPage(
        items=[admin_service.exercise_to_admin_response(exercise) for exercise in exercises],
        total=total,
        page=page,
        page_size=size
    )


@router.get("/exercises/{exercise_id}", response_model=AdminExerciseResponse)
async def get_exercise(exercise_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    exercise = session.get(Exercise, exercise_id)
    if not exercise:
        raise NotFoundError(f"Exercise with id {exercise_id} not found")
    return admin_service.exercise_to_admin_response(exercise)


@router.post("/exercises", response_model=AdminExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(admin_id: int, request: CreateExerciseRequest, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    return admin_service.exercise_to_admin_response(admin_service.create_exercise(session, request))


@router.patch("/exercises/{exercise_id}", response_model=AdminExerciseResponse)
async def update_exercise(
    exercise_id: int,
    admin_id: int,
    request: UpdateExerciseRequest,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    return admin_service.exercise_to_admin_response(
        admin_service.update_exercise(session, exercise_id, request)
    )


@router.delete("/exercises/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(exercise_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    admin_service.delete_exercise(session, exercise_id)


# --- Users ---

@router.get("/users", response_model=UsersPage)
async def list_users(
    admin_id: int,
    page: int = 1,
    page_size: Optional[int] = None,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    size = _page_size(page_size)
    users, total = admin_service.paginate(session, User, page, size)
    return UsersPage(
        items=[AdminUserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        page_size=size
    )


@router.get("/users/{user_id}", response_model=AdminUserResponse)
async def get_user(user_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return AdminUserResponse.model_validate(user)


@router.patch("/users/{user_id}/toggle-admin", response_model=AdminUserResponse)
async def toggle_admin(user_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    return AdminUserResponse.model_validate(admin_service.toggle_admin(session, admin_id, user_id))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user(user_id: int, admin_id: int, session: Session = Depends(get_session)):
    admin_service.require_admin(session, admin_id)
    if user_id == admin_id:
        raise ValidationError("Admins cannot delete their own account")
    delete_user(session, user_id)


# --- Transactions ---

@router.get("/transactions", response_model=TransactionsPage)
async def list_transactions(
    admin_id: int,
    page: int = 1,
    page_size: Optional[int] = None,
    session: Session = Depends(get_session)
):
    admin_service.require_admin(session, admin_id)
    size = _page_size(page_size)
    transactions, total = admin_service.paginate(
        session, Transaction, page, size,
        order_by=[Transaction.created_at.desc(), Transaction.id.desc()]
    )
    return TransactionsPage(
        items=[TransactionResponse.model_validate(transaction) for transaction in transactions],
        total=total,
        page=page,
        page_size=size
    )
