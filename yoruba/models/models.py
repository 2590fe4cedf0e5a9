"""
Models module - re-exports all models.

Importing this module registers every table on SQLModel.metadata.
"""
from yoruba.models.enums import (
    UserRole,
    LevelColor,
    ExerciseType,
    TransactionStatus,
    PaymentMethod,
    TrailStatus,
    LeaderboardRange,
)
from yoruba.models.user import User
from yoruba.models.trail import Trail
from yoruba.models.level import Level
from yoruba.models.exercise import Exercise
from yoruba.models.user_level import UserLevel
from yoruba.models.user_exercise import UserExercise
from yoruba.models.transaction import Transaction

__all__ = [
    'UserRole',
    'LevelColor',
    'ExerciseType',
    'TransactionStatus',
    'PaymentMethod',
    'TrailStatus',
    'LeaderboardRange',
    'User',
    'Trail',
    'Level',
    'Exercise',
    'UserLevel',
    'UserExercise',
    'Transaction',
]
