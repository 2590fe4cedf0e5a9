"""
Trail model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from yoruba.core.clock import utcnow

if TYPE_CHECKING:
    from yoruba.models.level import Level


class Trail(SQLModel, table=True):
    """Trail table - ordered learning paths."""
    __tablename__ = "trail"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    theme: str
    order: int = Field(index=True)  # 1-based position among trails
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    levels: List["Level"] = Relationship(
        back_populates="trail",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
