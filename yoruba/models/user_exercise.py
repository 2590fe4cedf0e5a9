"""
UserExercise model - append-only exercise attempts.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from yoruba.core.clock import utcnow

if TYPE_CHECKING:
    from yoruba.models.user import User
    from yoruba.models.exercise import Exercise


class UserExercise(SQLModel, table=True):
    """UserExercise table - one row per submitted answer, never updated."""
    __tablename__ = "user_exercise"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    exercise_id: int = Field(foreign_key="exercise.id", index=True)
    correct: bool
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)

    # Relationships
    user: "User" = Relationship(back_populates="user_exercises")
    exercise: "Exercise" = Relationship(back_populates="user_exercises")
