from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from yoruba.models.enums import UserRole, LevelColor


class LoginRequest(BaseModel):
    """Login request schema."""
    username: str = Field(..., description="Username or email")
    password: str = Field(..., min_length=1, description="Password")


class RegisterRequest(BaseModel):
    """Registration request schema."""
    username: str = Field(..., min_length=3, max_length=50, description="Username")
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")
    email: Optional[EmailStr] = Field(None, description="Email address")


class UserResponse(BaseModel):
    """User response schema (without password)."""
    id: int
    username: str
    email: Optional[str] = None
    role: UserRole = UserRole.USER
    xp: int = 0
    diamonds: int = 0
    lives: int = 5
    max_lives: int = 5
    next_life_at: Optional[datetime] = None
    current_level_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Authentication response schema."""
    user: UserResponse
    message: str


class CurrentLevelResponse(BaseModel):
    id: int
    name: str
    color: LevelColor
    trail_name: Optional[str] = None


class UserStatsResponse(BaseModel):
    """Profile statistics."""
    xp: int
    diamonds: int
    lives: int
    completed_levels: int
    correct_answers: int
    current_level: Optional[CurrentLevelResponse] = None
