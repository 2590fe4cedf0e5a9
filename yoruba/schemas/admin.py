"""
Admin panel schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from yoruba.models.enums import (
    LevelColor,
    ExerciseType,
    UserRole,
    PaymentMethod,
    TransactionStatus,
)


# --- Trails ---

class TrailResponse(BaseModel):
    id: int
    name: str
    theme: str
    order: int
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreateTrailRequest(BaseModel):
    name: str = Field(..., min_length=1)
    theme: str = Field(..., min_length=1)
    order: int = Field(..., ge=1)
    is_active: bool = True


class UpdateTrailRequest(BaseModel):
    name: Optional[str] = None
    theme: Optional[str] = None
    order: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class TrailsPage(BaseModel):
    items: List[TrailResponse]
    total: int
    page: int
    page_size: int


# --- Levels ---

class LevelResponse(BaseModel):
    id: int
    name: str
    color: LevelColor
    xp: int
    trail_id: int
    order: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreateLevelRequest(BaseModel):
    name: str = Field(..., min_length=1)
    color: LevelColor
    xp: Optional[int] = Field(None, ge=0, description="Defaults to the tier's XP")
    trail_id: int
    order: int = Field(..., ge=1)


class UpdateLevelRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[LevelColor] = None
    xp: Optional[int] = Field(None, ge=0)
    trail_id: Optional[int] = None
    order: Optional[int] = Field(None, ge=1)


class LevelsPage(BaseModel):
    items: List[LevelResponse]
    total: int
    page: int
    page_size: int


# --- Exercises ---

class ExerciseOptionInput(BaseModel):
    """Option as stored: the camelCase isCorrect key matches the options column."""
    id: Optional[int] = None
    text: str
    isCorrect: bool = False


class AdminExerciseResponse(BaseModel):
    """Exercise with its answer key."""
    id: int
    question: str
    type: ExerciseType
    options: List[ExerciseOptionInput] = []
    correct_answer: Optional[str] = None
    audio_url: Optional[str] = None
    level_id: int
    created_at: Optional[datetime] = None


class CreateExerciseRequest(BaseModel):
    question: str = Field(..., min_length=1)
    type: ExerciseType
    options: List[ExerciseOptionInput] = []
    correct_answer: Optional[str] = None
    audio_url: Optional[str] = None
    level_id: int

    class Config:
        json_schema_extra = {
            "example": {
                "question": "Como se diz 'Bom dia' em Yorùbá?",
                "type": "multiple_choice",
                "options": [
                    {"text": "Ẹ káàárọ̀", "isCorrect": True},
                    {"text": "Ẹ káàsán", "isCorrect": False}
                ],
                "level_id": 1
            }
        }


class UpdateExerciseRequest(BaseModel):
    question: Optional[str] = None
    type: Optional[ExerciseType] = None
    options: Optional[List[ExerciseOptionInput]] = None
    correct_answer: Optional[str] = None
    audio_url: Optional[str] = None
    level_id: Optional[int] = None


class ExercisesPage(BaseModel):
    items: List[AdminExerciseResponse]
    total: int
    page: int
    page_size: int


# --- Users and transactions ---

class AdminUserResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    role: UserRole
    xp: int
    diamonds: int
    lives: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UsersPage(BaseModel):
    items: List[AdminUserResponse]
    total: int
    page: int
    page_size: int


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    amount: float
    description: str
    payment_method: PaymentMethod
    status: TransactionStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionsPage(BaseModel):
    items: List[TransactionResponse]
    total: int
    page: int
    page_size: int


class AdminStatsResponse(BaseModel):
    """Dashboard numbers."""
    users: int
    trails: int
    levels: int
    exercises: int
    total_xp: int
    correct_answers: int
    completed_transactions: int
    recent_users: List[AdminUserResponse]
    recent_transactions: List[TransactionResponse]
