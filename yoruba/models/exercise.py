"""
Exercise model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from yoruba.core.clock import utcnow
from yoruba.models.enums import ExerciseType

if TYPE_CHECKING:
    from yoruba.models.level import Level
    from yoruba.models.user_exercise import UserExercise


class Exercise(SQLModel, table=True):
    """Exercise table - single questions within a level."""
    __tablename__ = "exercise"

    id: Optional[int] = Field(default=None, primary_key=True)
    question: str
    type: ExerciseType
    options: str = Field(default="[]")  # JSON list of {id, text, isCorrect}
    correct_answer: Optional[str] = Field(default=None)  # fill_blank and audio
    audio_url: Optional[str] = Field(default=None)  # audio
    level_id: int = Field(foreign_key="level.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    level: "Level" = Relationship(back_populates="exercises")
    user_exercises: List["UserExercise"] = Relationship(
        back_populates="exercise",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
