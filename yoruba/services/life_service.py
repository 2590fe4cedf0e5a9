"""
Lives economy: lazy regeneration, life loss and refills.

There is no scheduler. The effective life count is computed whenever a user's
resources are read, from the stored (lives, next_life_at) pair and the
current time. The policy is pure; callers persist the returned state.

Invariant kept on every returned state: 0 <= lives <= max_lives and
next_life_at is None exactly when lives == max_lives.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import logging

from yoruba.core.config import settings
from yoruba.core.exceptions import InsufficientLivesError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LifeState:
    lives: int
    next_life_at: Optional[datetime]


class LifePolicy:
    """
    Regeneration rules.

    Args:
        max_lives: Life cap (MAX_LIVES)
        regen_interval: Time until one life comes back
        catch_up: When False (default) at most one life is restored per read,
            however long the user was away. When True every fully elapsed
            interval restores a life.
    """

    def __init__(
        self,
        max_lives: int = 5,
        regen_interval: timedelta = timedelta(minutes=30),
        catch_up: bool = False,
    ):
        self.max_lives = max_lives
        self.regen_interval = regen_interval
        self.catch_up = catch_up

    def _normalize(self, lives: int, next_life_at: Optional[datetime], now: datetime) -> LifeState:
        lives = max(0, min(self.max_lives, lives))
        if lives == self.max_lives:
            return LifeState(lives, None)
        if next_life_at is None:
            # Stored state lost its deadline; restart the countdown
            return LifeState(lives, now + self.regen_interval)
        return LifeState(lives, next_life_at)

    def lives_to_restore(self, next_life_at: datetime, now: datetime) -> int:
        """Lives earned by the time now, given a due deadline."""
        if not self.catch_up:
            return 1
        return 1 + int((now - next_life_at) / self.regen_interval)

    def regenerate(self, state: LifeState, now: datetime) -> LifeState:
        """Effective life state at time now."""
        current = self._normalize(state.lives, state.next_life_at, now)
        if current.next_life_at is None or now < current.next_life_at:
            return current

        restored = self.lives_to_restore(current.next_life_at, now)
        lives = min(self.max_lives, current.lives + restored)
        if lives == self.max_lives:
            return LifeState(lives, None)
        if self.catch_up:
            # Time already elapsed towards the following life is kept
            return LifeState(lives, current.next_life_at + restored * self.regen_interval)
        return LifeState(lives, now + self.regen_interval)

    def lose_life(self, state: LifeState, now: datetime) -> LifeState:
        """
        Spend one life.

        Leaving the full state starts the regeneration countdown; an already
        running countdown is kept.

        Raises:
            InsufficientLivesError: If there is no life to spend
        """
        if state.lives <= 0:
            raise InsufficientLivesError("Cannot spend a life with zero lives left")
        lives = min(self.max_lives, state.lives) - 1
        next_life_at = state.next_life_at
        if state.lives >= self.max_lives or next_life_at is None:
            next_life_at = now + self.regen_interval
        return LifeState(lives, next_life_at)

    def refill(self) -> LifeState:
        """Full lives, no countdown."""
        return LifeState(self.max_lives, None)


def build_life_policy() -> LifePolicy:
    """Life policy configured from settings."""
    return LifePolicy(
        max_lives=settings.max_lives,
        regen_interval=timedelta(minutes=settings.life_regeneration_minutes),
        catch_up=settings.life_regeneration_mode == "catch_up",
    )
