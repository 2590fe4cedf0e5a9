"""
Progression engine: level access, exercise sequencing, attempt recording and
level completion.

The engine only talks to the ContentRepository and ProgressStore interfaces.
Every write sequence for a user runs while holding that user's lock and
inside ProgressStore.transaction(), so two racing requests for the same user
cannot double-grant a reward or double-spend a life.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Set
import logging
import threading

from yoruba.core.clock import Clock, utcnow
from yoruba.core.exceptions import (
    NotFoundError,
    LevelLockedError,
    OutOfLivesError,
    ExerciseLevelMismatchError,
)
from yoruba.repositories.base import ContentRepository, ProgressStore
from yoruba.schemas.records import (
    LevelRecord,
    ExerciseRecord,
    LevelProgressRecord,
    UserResources,
)
from yoruba.services.life_service import LifePolicy, LifeState, build_life_policy
from yoruba.services.reward_service import diamonds_for_level

logger = logging.getLogger(__name__)


class UserLockRegistry:
    """One lock per user id, created on first use."""

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: int):
        with self.lock_for(user_id):
            yield


# Shared by every engine and shop instance in the process
user_locks = UserLockRegistry()


@dataclass
class LevelReward:
    """Outcome of a level's first completion."""
    level_id: int
    xp_earned: int
    diamonds_earned: int
    next_level_id: Optional[int] = None


@dataclass
class LevelEntry:
    """Result of start_or_resume_level."""
    level_id: int
    exercise: Optional[ExerciseRecord]
    attempted_count: int
    total_count: int
    all_exercises_done: bool = False
    reward: Optional[LevelReward] = None

    @property
    def level_completed(self) -> bool:
        return self.reward is not None


@dataclass
class AnswerResult:
    """Result of submit_answer."""
    level_id: int
    exercise_id: int
    correct: bool
    lives: int
    next_life_at: Optional[datetime]
    attempted_count: int
    total_count: int
    next_exercise: Optional[ExerciseRecord] = None
    reward: Optional[LevelReward] = None
    all_exercises_done: bool = False
    out_of_lives: bool = False

    @property
    def level_completed(self) -> bool:
        return self.reward is not None


class ProgressionEngine:
    """
    Orchestrates unlocking, exercise delivery and rewards for one request.

    Args:
        content: Read-only content repository
        progress: Per-user progress store
        life_policy: Regeneration rules (defaults to the configured policy)
        clock: Time source
        locks: Per-user lock registry (defaults to the process-wide one)
    """

    def __init__(
        self,
        content: ContentRepository,
        progress: ProgressStore,
        life_policy: Optional[LifePolicy] = None,
        clock: Clock = utcnow,
        locks: Optional[UserLockRegistry] = None,
    ):
        self.content = content
        self.progress = progress
        self.life_policy = life_policy or build_life_policy()
        self.clock = clock
        self.locks = locks or user_locks

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _require_user(self, user_id: int) -> UserResources:
        user = self.progress.get_user_resources(user_id)
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def _require_level(self, level_id: int) -> LevelRecord:
        level = self.content.get_level(level_id)
        if not level:
            raise NotFoundError(f"Level with id {level_id} not found")
        return level

    def _attempted_ids(self, user_id: int, level_id: int) -> Set[int]:
        return {
            attempt.exercise_id
            for attempt in self.progress.get_user_exercise_attempts(user_id, level_id)
        }

    @staticmethod
    def _first_unattempted(exercises: List[ExerciseRecord], attempted: Set[int]) -> Optional[ExerciseRecord]:
        for exercise in exercises:
            if exercise.id not in attempted:
                return exercise
        return None

    def predecessor_of(self, level: LevelRecord) -> Optional[LevelRecord]:
        """
        The level that must be completed before this one.

        That is the previous level of the same trail, or the highest-order
        level of the previous trail for a trail's first level. None when no
        such level exists (globally first level or a gap in the ordering).
        """
        trail = self.content.get_trail(level.trail_id)
        if not trail:
            raise NotFoundError(f"Trail with id {level.trail_id} not found")

        if trail.order == 1 and level.order == 1:
            return None

        if level.order > 1:
            for candidate in self.content.get_levels_by_trail(trail.id):
                if candidate.order == level.order - 1:
                    return candidate
            return None

        previous_trail = next(
            (t for t in self.content.get_trails() if t.order == trail.order - 1), None
        )
        if not previous_trail:
            return None
        previous_levels = self.content.get_levels_by_trail(previous_trail.id)
        return previous_levels[-1] if previous_levels else None

    def successor_of(self, level: LevelRecord) -> Optional[LevelRecord]:
        """Next level in the same trail, or the first level of the next trail."""
        for candidate in self.content.get_levels_by_trail(level.trail_id):
            if candidate.order == level.order + 1:
                return candidate

        trail = self.content.get_trail(level.trail_id)
        if not trail:
            return None
        next_trail = next(
            (t for t in self.content.get_trails() if t.order == trail.order + 1), None
        )
        if not next_trail:
            return None
        next_levels = self.content.get_levels_by_trail(next_trail.id)
        return next_levels[0] if next_levels else None

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _regenerate(self, user: UserResources) -> UserResources:
        stored = LifeState(user.lives, user.next_life_at)
        effective = self.life_policy.regenerate(stored, self.clock())
        if effective == stored:
            return user
        if effective.lives > stored.lives:
            logger.info(
                f"Regenerated lives for user {user.user_id}: {stored.lives} -> {effective.lives}"
            )
        return self.progress.update_user_resources(
            user.user_id, lives=effective.lives, next_life_at=effective.next_life_at
        )

    def _check_eligibility(self, user_id: int, level: LevelRecord) -> None:
        predecessor = self.predecessor_of(level)
        if predecessor is None:
            return
        previous = self.progress.get_user_level_progress(user_id, predecessor.id)
        if not previous or not previous.completed:
            logger.info(
                f"Level {level.id} locked for user {user_id}: level {predecessor.id} not completed"
            )
            raise LevelLockedError(level.id)

    def _enter_level(self, user_id: int, level: LevelRecord) -> LevelProgressRecord:
        """Return the user's progress row for the level, creating it after the eligibility check."""
        progress = self.progress.get_user_level_progress(user_id, level.id)
        if progress:
            return progress

        self._check_eligibility(user_id, level)
        self.progress.update_user_resources(user_id, current_level_id=level.id)
        progress = self.progress.upsert_user_level_progress(user_id, level.id)
        logger.info(f"User {user_id} unlocked level {level.id}")
        return progress

    def _complete_level(self, user_id: int, level: LevelRecord) -> LevelReward:
        """Mark the level completed, grant its reward and stage the next level."""
        now = self.clock()
        self.progress.upsert_user_level_progress(user_id, level.id, completed=True, completed_at=now)

        reward = LevelReward(
            level_id=level.id,
            xp_earned=level.xp,
            diamonds_earned=diamonds_for_level(level.color),
        )
        next_level = self.successor_of(level)
        if next_level:
            reward.next_level_id = next_level.id
            if next_level.trail_id == level.trail_id:
                self.progress.upsert_user_level_progress(user_id, next_level.id)
        self.progress.update_user_resources(
            user_id,
            current_level_id=next_level.id if next_level else None,
            xp_delta=reward.xp_earned,
            diamonds_delta=reward.diamonds_earned,
        )

        logger.info(
            f"User {user_id} completed level {level.id}: "
            f"+{reward.xp_earned} xp, +{reward.diamonds_earned} diamonds, "
            f"next level {reward.next_level_id}"
        )
        return reward

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def refresh_lives(self, user_id: int) -> UserResources:
        """Apply lazy regeneration and return the user's current resources."""
        with self.locks.hold(user_id):
            with self.progress.transaction():
                self.progress.lock_user(user_id)
                return self._regenerate(self._require_user(user_id))

    def start_or_resume_level(self, user_id: int, level_id: int) -> LevelEntry:
        """
        Enter a level and hand out its next unattempted exercise.

        When every exercise has been attempted the level is completed (first
        time only, with its reward) or reported as all_exercises_done.

        Raises:
            NotFoundError: Unknown user or level, or a level without exercises
            OutOfLivesError: The user has no lives left
            LevelLockedError: The prerequisite level is not completed
        """
        with self.locks.hold(user_id):
            with self.progress.transaction():
                self.progress.lock_user(user_id)
                user = self._regenerate(self._require_user(user_id))
                level = self._require_level(level_id)
                if user.lives <= 0:
                    logger.info(f"User {user_id} blocked from level {level_id}: out of lives")
                    raise OutOfLivesError(user.next_life_at)

                exercises = self.content.get_exercises_by_level(level_id)
                if not exercises:
                    raise NotFoundError(f"No exercises found for level {level_id}")

                progress = self._enter_level(user_id, level)
                if not progress.completed and user.current_level_id != level_id:
                    self.progress.update_user_resources(user_id, current_level_id=level_id)

                attempted = self._attempted_ids(user_id, level_id)
                entry = LevelEntry(
                    level_id=level_id,
                    exercise=self._first_unattempted(exercises, attempted),
                    attempted_count=len(attempted),
                    total_count=len(exercises),
                )
                if entry.exercise is None:
                    if progress.completed:
                        entry.all_exercises_done = True
                    else:
                        entry.reward = self._complete_level(user_id, level)
                return entry

    def submit_answer(self, user_id: int, level_id: int, exercise_id: int, correct: bool) -> AnswerResult:
        """
        Record one attempt and react to it.

        A wrong answer costs a life. Attempting the last unattempted exercise
        of a level that is not completed yet completes it.

        Raises:
            NotFoundError: Unknown user, level or exercise
            ExerciseLevelMismatchError: The exercise is not part of the level
            LevelLockedError: First access to a level whose prerequisite is
                not completed
            OutOfLivesError: Lives were already at zero; the attempt is
                still recorded
        """
        exercise = self.content.get_exercise(exercise_id)
        if not exercise:
            raise NotFoundError(f"Exercise with id {exercise_id} not found")
        if exercise.level_id != level_id:
            logger.warning(
                f"User {user_id} submitted exercise {exercise_id} for level {level_id}, "
                f"but it belongs to level {exercise.level_id}"
            )
            raise ExerciseLevelMismatchError(
                f"Exercise {exercise_id} does not belong to level {level_id}"
            )

        with self.locks.hold(user_id):
            with self.progress.transaction():
                self.progress.lock_user(user_id)
                user = self._regenerate(self._require_user(user_id))
                level = self._require_level(level_id)
                progress = self._enter_level(user_id, level)

                now = self.clock()
                self.progress.append_user_exercise_attempt(user_id, exercise_id, correct, now)
                logger.debug(f"User {user_id} attempted exercise {exercise_id}: correct={correct}")

                blocked = user.lives <= 0
                if not blocked:
                    result = self._react_to_attempt(user, level, progress, exercise_id, correct)

            # Raised after the transaction so the attempt itself is kept
            if blocked:
                logger.info(f"User {user_id} answered exercise {exercise_id} with no lives left")
                raise OutOfLivesError(user.next_life_at)
            return result

    def _react_to_attempt(
        self,
        user: UserResources,
        level: LevelRecord,
        progress: LevelProgressRecord,
        exercise_id: int,
        correct: bool,
    ) -> AnswerResult:
        if not correct:
            lives = self.life_policy.lose_life(LifeState(user.lives, user.next_life_at), self.clock())
            user = self.progress.update_user_resources(
                user.user_id, lives=lives.lives, next_life_at=lives.next_life_at
            )
            logger.info(f"User {user.user_id} lost a life: {user.lives} left")

        exercises = self.content.get_exercises_by_level(level.id)
        attempted = self._attempted_ids(user.user_id, level.id)
        result = AnswerResult(
            level_id=level.id,
            exercise_id=exercise_id,
            correct=correct,
            lives=user.lives,
            next_life_at=user.next_life_at,
            attempted_count=len(attempted),
            total_count=len(exercises),
            next_exercise=self._first_unattempted(exercises, attempted),
            out_of_lives=user.lives <= 0,
        )
        if result.next_exercise is None:
            if progress.completed:
                result.all_exercises_done = True
            else:
                result.reward = self._complete_level(user.user_id, level)
        return result
