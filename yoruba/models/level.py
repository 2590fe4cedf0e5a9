"""
Level model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from yoruba.core.clock import utcnow
from yoruba.models.enums import LevelColor

if TYPE_CHECKING:
    from yoruba.models.trail import Trail
    from yoruba.models.exercise import Exercise
    from yoruba.models.user_level import UserLevel


class Level(SQLModel, table=True):
    """Level table - tiered stages within a trail."""
    __tablename__ = "level"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    color: LevelColor
    xp: int  # XP granted on completion
    trail_id: int = Field(foreign_key="trail.id", index=True)
    order: int  # 1-based position within the trail
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    trail: "Trail" = Relationship(back_populates="levels")
    exercises: List["Exercise"] = Relationship(
        back_populates="level",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
    user_levels: List["UserLevel"] = Relationship(
        back_populates="level",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
