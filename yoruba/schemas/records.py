"""
Records exchanged between the services layer and the repositories.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from yoruba.models.enums import LevelColor, ExerciseType
from yoruba.schemas.content import ExerciseContent


class TrailRecord(BaseModel):
    id: int
    name: str
    theme: str
    order: int
    is_active: bool = True


class LevelRecord(BaseModel):
    id: int
    name: str
    color: LevelColor
    xp: int
    trail_id: int
    order: int


class ExerciseRecord(BaseModel):
    id: int
    level_id: int
    question: str
    content: ExerciseContent

    @property
    def type(self) -> ExerciseType:
        return ExerciseType(self.content.type)


class LevelProgressRecord(BaseModel):
    """Progress of one user on one level; current is derived from the user's pointer."""
    user_id: int
    level_id: int
    completed: bool = False
    current: bool = False
    completed_at: Optional[datetime] = None


class AttemptRecord(BaseModel):
    id: int
    user_id: int
    exercise_id: int
    correct: bool
    created_at: datetime


class UserResources(BaseModel):
    """Balances the engine is allowed to mutate."""
    user_id: int
    username: str
    xp: int = 0
    diamonds: int = 0
    lives: int = 5
    next_life_at: Optional[datetime] = None
    current_level_id: Optional[int] = None
