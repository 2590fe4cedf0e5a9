"""
User model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import hashlib

from yoruba.core.clock import utcnow
from yoruba.models.enums import UserRole

if TYPE_CHECKING:
    from yoruba.models.user_level import UserLevel
    from yoruba.models.user_exercise import UserExercise
    from yoruba.models.transaction import Transaction


class User(SQLModel, table=True):
    """User table - stores account information and resource balances."""
    __tablename__ = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)  # Unique username
    email: Optional[str] = Field(default=None)
    password: str  # Hashed password
    role: UserRole = Field(default=UserRole.USER)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Resources
    xp: int = Field(default=0)  # Never decreases
    diamonds: int = Field(default=0)  # Spendable currency, never negative
    lives: int = Field(default=5)
    next_life_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))  # Null iff lives are full

    # Level the user is currently working on (single pointer per user)
    current_level_id: Optional[int] = Field(default=None, foreign_key="level.id")

    # Relationships
    user_levels: List["UserLevel"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
    user_exercises: List["UserExercise"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )
    transactions: List["Transaction"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete"},
    )

    @staticmethod
    def hash_password(password: str) -> str:
        """Simple password hashing using SHA256."""
        return hashlib.sha256(password.encode()).hexdigest()

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return self.password == self.hash_password(password)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
