"""
In-memory repositories.

Dict-backed implementations of the storage interfaces, used as test doubles
and for running the engine without a database. Content is loaded through the
add_* helpers; ids are assigned sequentially in insertion order.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union
import copy
import itertools
import logging

from yoruba.core.exceptions import NotFoundError
from yoruba.models.enums import LevelColor, PaymentMethod, TransactionStatus
from yoruba.repositories.base import ContentRepository, ProgressStore, UNSET
from yoruba.schemas.content import MultipleChoiceContent, FillBlankContent, AudioContent
from yoruba.schemas.records import (
    TrailRecord,
    LevelRecord,
    ExerciseRecord,
    LevelProgressRecord,
    AttemptRecord,
    UserResources,
)

logger = logging.getLogger(__name__)


class MemoryContentRepository(ContentRepository):
    def __init__(self):
        self.trails: Dict[int, TrailRecord] = {}
        self.levels: Dict[int, LevelRecord] = {}
        self.exercises: Dict[int, ExerciseRecord] = {}
        self._ids = itertools.count(1)

    def add_trail(self, name: str, order: int, theme: str = "", is_active: bool = True) -> TrailRecord:
        trail = TrailRecord(id=next(self._ids), name=name, theme=theme, order=order, is_active=is_active)
        self.trails[trail.id] = trail
        return trail

    def add_level(
        self, trail_id: int, order: int, color: LevelColor, xp: int, name: Optional[str] = None
    ) -> LevelRecord:
        level = LevelRecord(
            id=next(self._ids),
            name=name or f"{color.value.title()} {order}",
            color=color,
            xp=xp,
            trail_id=trail_id,
            order=order,
        )
        self.levels[level.id] = level
        return level

    def add_exercise(
        self,
        level_id: int,
        question: str,
        content: Union[MultipleChoiceContent, FillBlankContent, AudioContent],
    ) -> ExerciseRecord:
        exercise = ExerciseRecord(id=next(self._ids), level_id=level_id, question=question, content=content)
        self.exercises[exercise.id] = exercise
        return exercise

    def get_trails(self) -> List[TrailRecord]:
        return sorted(self.trails.values(), key=lambda t: (t.order, t.id))

    def get_trail(self, trail_id: int) -> Optional[TrailRecord]:
        return self.trails.get(trail_id)

    def get_levels_by_trail(self, trail_id: int) -> List[LevelRecord]:
        levels = [level for level in self.levels.values() if level.trail_id == trail_id]
        return sorted(levels, key=lambda l: (l.order, l.id))

    def get_level(self, level_id: int) -> Optional[LevelRecord]:
        return self.levels.get(level_id)

    def get_exercises_by_level(self, level_id: int) -> List[ExerciseRecord]:
        exercises = [ex for ex in self.exercises.values() if ex.level_id == level_id]
        return sorted(exercises, key=lambda ex: ex.id)

    def get_exercise(self, exercise_id: int) -> Optional[ExerciseRecord]:
        return self.exercises.get(exercise_id)


class MemoryProgressStore(ProgressStore):
    def __init__(self, content: MemoryContentRepository):
        # Needed to resolve which level an attempted exercise belongs to
        self.content = content
        self.users: Dict[int, UserResources] = {}
        self.user_levels: Dict[Tuple[int, int], LevelProgressRecord] = {}
        self.attempts: List[AttemptRecord] = []
        self.transactions: Dict[int, dict] = {}
        self._user_ids = itertools.count(1)
        self._attempt_ids = itertools.count(1)
        self._transaction_ids = itertools.count(1)

    def add_user(self, username: str, **resources) -> UserResources:
        user = UserResources(user_id=next(self._user_ids), username=username, **resources)
        self.users[user.user_id] = user
        return user

    def _state(self) -> tuple:
        return (self.users, self.user_levels, self.attempts, self.transactions)

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy(self._state())
        try:
            yield self
        except Exception:
            self.users, self.user_levels, self.attempts, self.transactions = snapshot
            raise

    def _get_user(self, user_id: int) -> UserResources:
        user = self.users.get(user_id)
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def _with_current(self, progress: LevelProgressRecord) -> LevelProgressRecord:
        current_level_id = self._get_user(progress.user_id).current_level_id
        return progress.model_copy(update={"current": progress.level_id == current_level_id})

    def get_user_level_progress(self, user_id: int, level_id: int) -> Optional[LevelProgressRecord]:
        progress = self.user_levels.get((user_id, level_id))
        return self._with_current(progress) if progress else None

    def list_user_level_progress(self, user_id: int) -> List[LevelProgressRecord]:
        return [
            self._with_current(progress)
            for (owner_id, _), progress in self.user_levels.items()
            if owner_id == user_id
        ]

    def upsert_user_level_progress(
        self,
        user_id: int,
        level_id: int,
        *,
        completed: Optional[bool] = None,
        completed_at: Optional[datetime] = None,
    ) -> LevelProgressRecord:
        self._get_user(user_id)
        progress = self.user_levels.get((user_id, level_id)) or LevelProgressRecord(
            user_id=user_id, level_id=level_id
        )
        if completed is not None:
            update = {"completed": completed}
            if completed and progress.completed_at is None:
                update["completed_at"] = completed_at
            progress = progress.model_copy(update=update)
        self.user_levels[(user_id, level_id)] = progress
        return self._with_current(progress)

    def get_user_exercise_attempts(self, user_id: int, level_id: Optional[int] = None) -> List[AttemptRecord]:
        attempts = [attempt for attempt in self.attempts if attempt.user_id == user_id]
        if level_id is not None:
            level_exercise_ids = {ex.id for ex in self.content.get_exercises_by_level(level_id)}
            attempts = [attempt for attempt in attempts if attempt.exercise_id in level_exercise_ids]
        return attempts

    def append_user_exercise_attempt(
        self, user_id: int, exercise_id: int, correct: bool, created_at: datetime
    ) -> AttemptRecord:
        self._get_user(user_id)
        attempt = AttemptRecord(
            id=next(self._attempt_ids),
            user_id=user_id,
            exercise_id=exercise_id,
            correct=correct,
            created_at=created_at,
        )
        self.attempts.append(attempt)
        return attempt

    def get_correct_attempts_since(self, since: datetime) -> List[AttemptRecord]:
        return [attempt for attempt in self.attempts if attempt.correct and attempt.created_at >= since]

    def get_user_resources(self, user_id: int) -> Optional[UserResources]:
        return self.users.get(user_id)

    def list_user_resources(self) -> List[UserResources]:
        return [self.users[user_id] for user_id in sorted(self.users)]

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
        update = {
            "xp": user.xp + xp_delta,
            "diamonds": max(0, user.diamonds + diamonds_delta),
        }
        if lives is not UNSET:
            update["lives"] = lives
        if next_life_at is not UNSET:
            update["next_life_at"] = next_life_at
        if current_level_id is not UNSET:
            update["current_level_id"] = current_level_id
        user = user.model_copy(update=update)
        self.users[user_id] = user
        return user

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
        transaction_id = next(self._transaction_ids)
        self.transactions[transaction_id] = {
            "id": transaction_id,
            "user_id": user_id,
            "amount": amount,
            "description": description,
            "payment_method": payment_method,
            "status": status,
            "payment_token": payment_token,
            "completed_at": completed_at,
        }
        return transaction_id

    def update_transaction_status(
        self, transaction_id: int, status: TransactionStatus, completed_at: Optional[datetime] = None
    ) -> None:
        transaction = self.transactions.get(transaction_id)
        if not transaction:
            raise NotFoundError(f"Transaction with id {transaction_id} not found")
        transaction["status"] = status
        if status == TransactionStatus.COMPLETED and transaction["completed_at"] is None:
            transaction["completed_at"] = completed_at
