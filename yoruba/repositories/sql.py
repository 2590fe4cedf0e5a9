"""
SQLModel-backed repositories.

Both classes wrap the request's Session; the store flushes on every write and
commits only when a transaction() block exits cleanly.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional
import logging

from sqlmodel import Session, select

from yoruba.core.clock import as_utc
from yoruba.core.exceptions import NotFoundError
from yoruba.models.models import (
    Trail,
    Level,
    Exercise,
    User,
    UserLevel,
    UserExercise,
    Transaction,
    PaymentMethod,
    TransactionStatus,
)
from yoruba.repositories.base import ContentRepository, ProgressStore, UNSET
from yoruba.schemas.content import decode_exercise_content
from yoruba.schemas.records import (
    TrailRecord,
    LevelRecord,
    ExerciseRecord,
    LevelProgressRecord,
    AttemptRecord,
    UserResources,
)

logger = logging.getLogger(__name__)


def trail_to_record(trail: Trail) -> TrailRecord:
    return TrailRecord(
        id=trail.id,
        name=trail.name,
        theme=trail.theme,
        order=trail.order,
        is_active=trail.is_active,
    )


def level_to_record(level: Level) -> LevelRecord:
    return LevelRecord(
        id=level.id,
        name=level.name,
        color=level.color,
        xp=level.xp,
        trail_id=level.trail_id,
        order=level.order,
    )


def exercise_to_record(exercise: Exercise) -> ExerciseRecord:
    return ExerciseRecord(
        id=exercise.id,
        level_id=exercise.level_id,
        question=exercise.question,
        content=decode_exercise_content(
            exercise.type, exercise.options, exercise.correct_answer, exercise.audio_url
        ),
    )


def user_to_resources(user: User) -> UserResources:
    return UserResources(
        user_id=user.id,
        username=user.username,
        xp=user.xp,
        diamonds=user.diamonds,
        lives=user.lives,
        next_life_at=as_utc(user.next_life_at),
        current_level_id=user.current_level_id,
    )


def user_for_update(user_id: int):
    """Row-locking user select; dialects without row locks (SQLite) drop the FOR UPDATE clause."""
    return (
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def _attempt_to_record(attempt: UserExercise) -> AttemptRecord:
    return AttemptRecord(
        id=attempt.id,
        user_id=attempt.user_id,
        exercise_id=attempt.exercise_id,
        correct=attempt.correct,
        created_at=as_utc(attempt.created_at),
    )


class SqlContentRepository(ContentRepository):
    def __init__(self, session: Session):
        self.session = session

    def get_trails(self) -> List[TrailRecord]:
        trails = self.session.exec(select(Trail).order_by(Trail.order, Trail.id)).all()
        return [trail_to_record(trail) for trail in trails]

    def get_trail(self, trail_id: int) -> Optional[TrailRecord]:
        trail = self.session.get(Trail, trail_id)
        return trail_to_record(trail) if trail else None

    def get_levels_by_trail(self, trail_id: int) -> List[LevelRecord]:
        levels = self.session.exec(
            select(Level).where(Level.trail_id == trail_id).order_by(Level.order, Level.id)
        ).all()
        return [level_to_record(level) for level in levels]

    def get_level(self, level_id: int) -> Optional[LevelRecord]:
        level = self.session.get(Level, level_id)
        return level_to_record(level) if level else None

    def get_exercises_by_level(self, level_id: int) -> List[ExerciseRecord]:
        exercises = self.session.exec(
            select(Exercise).where(Exercise.level_id == level_id).order_by(Exercise.id)
        ).all()
        return [exercise_to_record(exercise) for exercise in exercises]

    def get_exercise(self, exercise_id: int) -> Optional[ExerciseRecord]:
        exercise = self.session.get(Exercise, exercise_id)
        return exercise_to_record(exercise) if exercise else None


class SqlProgressStore(ProgressStore):
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(f"Rolled back progress transaction: {type(e).__name__}: {str(e)}")
            raise

    def lock_user(self, user_id: int) -> None:
        self.session.exec(user_for_update(user_id)).first()

    def _get_user(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def _get_user_level(self, user_id: int, level_id: int) -> Optional[UserLevel]:
        return self.session.exec(
            select(UserLevel).where(
                UserLevel.user_id == user_id,
                UserLevel.level_id == level_id
            )
        ).first()

    def _to_progress(self, user_level: UserLevel, current_level_id: Optional[int]) -> LevelProgressRecord:
        return LevelProgressRecord(
            user_id=user_level.user_id,
            level_id=user_level.level_id,
            completed=user_level.completed,
            current=user_level.level_id == current_level_id,
            completed_at=as_utc(user_level.completed_at),
        )

    def get_user_level_progress(self, user_id: int, level_id: int) -> Optional[LevelProgressRecord]:
        user_level = self._get_user_level(user_id, level_id)
        if not user_level:
            return None
        return self._to_progress(user_level, self._get_user(user_id).current_level_id)

    def list_user_level_progress(self, user_id: int) -> List[LevelProgressRecord]:
        current_level_id = self._get_user(user_id).current_level_id
        user_levels = self.session.exec(
            select(UserLevel).where(UserLevel.user_id == user_id)
        ).all()
        return [self._to_progress(user_level, current_level_id) for user_level in user_levels]

    def upsert_user_level_progress(
        self,
        user_id: int,
        level_id: int,
        *,
        completed: Optional[bool] = None,
        completed_at: Optional[datetime] = None,
    ) -> LevelProgressRecord:
        user_level = self._get_user_level(user_id, level_id)
        if not user_level:
            user_level = UserLevel(user_id=user_id, level_id=level_id, completed=False)
            self.session.add(user_level)

        if completed is not None:
            user_level.completed = completed
            if completed and user_level.completed_at is None:
                user_level.completed_at = completed_at
        self.session.flush()
        return self._to_progress(user_level, self._get_user(user_id).current_level_id)

    def get_user_exercise_attempts(self, user_id: int, level_id: Optional[int] = None) -> List[AttemptRecord]:
        query = select(UserExercise).where(UserExercise.user_id == user_id)
        if level_id is not None:
            query = query.join(Exercise, Exercise.id == UserExercise.exercise_id).where(
                Exercise.level_id == level_id
            )
        attempts = self.session.exec(query.order_by(UserExercise.id)).all()
        return [_attempt_to_record(attempt) for attempt in attempts]

    def append_user_exercise_attempt(
        self, user_id: int, exercise_id: int, correct: bool, created_at: datetime
    ) -> AttemptRecord:
        attempt = UserExercise(
            user_id=user_id,
            exercise_id=exercise_id,
            correct=correct,
            created_at=created_at
        )
        self.session.add(attempt)
        self.session.flush()
        return _attempt_to_record(attempt)

    def get_correct_attempts_since(self, since: datetime) -> List[AttemptRecord]:
        attempts = self.session.exec(
            select(UserExercise)
            .where(
                UserExercise.correct == True,  # noqa: E712
                UserExercise.created_at >= since
            )
            .order_by(UserExercise.id)
        ).all()
        return [_attempt_to_record(attempt) for attempt in attempts]

    def get_user_resources(self, user_id: int) -> Optional[UserResources]:
        user = self.session.get(User, user_id)
        return user_to_resources(user) if user else None

    def list_user_resources(self) -> List[UserResources]:
        users = self.session.exec(select(User).order_by(User.id)).all()
        return [user_to_resources(user) for user in users]

    def update_user_resources(
        self,
        user_id: int,
        *,
        lives=UNSET,
        next_life_at=UNSET,
        current_level_id=UNSET,
        xp_delta: int = 0,
        diamonds_delta: int = 0,
    ) -> UserResources:
        if xp_delta < 0:
            raise ValueError("xp_delta must not be negative")

        user = self._get_user(user_id)
        if lives is not UNSET:
            user.lives = lives
        if next_life_at is not UNSET:
            user.next_life_at = next_life_at
        if current_level_id is not UNSET:
            user.current_level_id = current_level_id
        user.xp += xp_delta
        user.diamonds = max(0, user.diamonds + diamonds_delta)

        self.session.add(user)
        self.session.flush()
        return user_to_resources(user)

    def record_transaction(
        self,
        user_id: int,
        *,
        amount: float,
        description: str,
        payment_method: PaymentMethod,
        status: TransactionStatus,
        payment_token: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> int:
        transaction = Transaction(
            user_id=user_id,
            amount=amount,
            description=description,
            payment_method=payment_method,
            status=status,
            payment_token=payment_token,
            completed_at=completed_at
        )
        self.session.add(transaction)
        self.session.flush()
        return transaction.id

    def update_transaction_status(
        self, transaction_id: int, status: TransactionStatus, completed_at: Optional[datetime] = None
    ) -> None:
        transaction = self.session.get(Transaction, transaction_id)
        if not transaction:
            raise NotFoundError(f"Transaction with id {transaction_id} not found")
        transaction.status = status
        if status == TransactionStatus.COMPLETED and transaction.completed_at is None:
            transaction.completed_at = completed_at
        self.session.add(transaction)
        self.session.flush()
