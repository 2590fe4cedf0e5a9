"""
Storage interfaces the progression engine depends on.

ContentRepository is read-only access to trails, levels and exercises.
ProgressStore holds everything that changes per user: level progress,
exercise attempts, resource balances and shop transactions.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import List, Optional

from yoruba.models.enums import PaymentMethod, TransactionStatus
from yoruba.schemas.records import (
    TrailRecord,
    LevelRecord,
    ExerciseRecord,
    LevelProgressRecord,
    AttemptRecord,
    UserResources,
)


class _Unset:
    """Marker for 'leave this field unchanged' where None is a valid value."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


class ContentRepository(ABC):
    """Read-only trails -> levels -> exercises hierarchy."""

    @abstractmethod
    def get_trails(self) -> List[TrailRecord]:
        """All trails ordered by order."""

    @abstractmethod
    def get_trail(self, trail_id: int) -> Optional[TrailRecord]:
        ...

    @abstractmethod
    def get_levels_by_trail(self, trail_id: int) -> List[LevelRecord]:
        """Levels of a trail ordered by order."""

    @abstractmethod
    def get_level(self, level_id: int) -> Optional[LevelRecord]:
        ...

    @abstractmethod
    def get_exercises_by_level(self, level_id: int) -> List[ExerciseRecord]:
        """Exercises of a level in creation order."""

    @abstractmethod
    def get_exercise(self, exercise_id: int) -> Optional[ExerciseRecord]:
        ...


class ProgressStore(ABC):
    """Durable per-user state."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Context manager wrapping a write sequence.

        Changes made inside are committed when the block exits normally and
        discarded when it raises.
        """

    def lock_user(self, user_id: int) -> None:
        """
        Take a storage-level lock on the user for the rest of the current
        transaction. In-process callers already serialize on UserLockRegistry;
        this covers writers in other processes.
        """

    @abstractmethod
    def get_user_level_progress(self, user_id: int, level_id: int) -> Optional[LevelProgressRecord]:
        ...

    @abstractmethod
    def list_user_level_progress(self, user_id: int) -> List[LevelProgressRecord]:
        ...

    @abstractmethod
    def upsert_user_level_progress(
        self,
        user_id: int,
        level_id: int,
        *,
        completed: Optional[bool] = None,
        completed_at: Optional[datetime] = None,
    ) -> LevelProgressRecord:
        """
        Create the (user, level) row if missing and apply the given fields.

        completed_at is only written together with completed=True.
        """

    @abstractmethod
    def get_user_exercise_attempts(self, user_id: int, level_id: Optional[int] = None) -> List[AttemptRecord]:
        """Attempts of a user, optionally limited to exercises of one level."""

    @abstractmethod
    def append_user_exercise_attempt(
        self, user_id: int, exercise_id: int, correct: bool, created_at: datetime
    ) -> AttemptRecord:
        ...

    @abstractmethod
    def get_correct_attempts_since(self, since: datetime) -> List[AttemptRecord]:
        """Correct attempts of all users with created_at >= since."""

    @abstractmethod
    def get_user_resources(self, user_id: int) -> Optional[UserResources]:
        ...

    @abstractmethod
    def list_user_resources(self) -> List[UserResources]:
        ...

    @abstractmethod
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
        """
        Apply resource changes to a user.

        xp_delta must not be negative. The diamond balance is floored at zero.
        Fields passed as UNSET are left untouched.
        """

    @abstractmethod
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
        """Store a shop transaction and return its id."""

    @abstractmethod
    def update_transaction_status(
        self, transaction_id: int, status: TransactionStatus, completed_at: Optional[datetime] = None
    ) -> None:
        ...
