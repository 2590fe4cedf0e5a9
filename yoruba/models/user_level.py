"""
UserLevel model - per user progress on a level.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime, UniqueConstraint
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from yoruba.core.clock import utcnow

if TYPE_CHECKING:
    from yoruba.models.user import User
    from yoruba.models.level import Level


class UserLevel(SQLModel, table=True):
    """UserLevel table - created on first access, flipped to completed once."""
    __tablename__ = "user_level"
    __table_args__ = (UniqueConstraint("user_id", "level_id", name="uq_user_level_user_level"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    level_id: int = Field(foreign_key="level.id", index=True)
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Relationships
    user: "User" = Relationship(back_populates="user_levels")
    level: "Level" = Relationship(back_populates="user_levels")
