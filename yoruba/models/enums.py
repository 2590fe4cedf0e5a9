"""
Model enums.
"""
from enum import Enum


class UserRole(str, Enum):
    """Role of a user account."""
    USER = "user"
    ADMIN = "admin"


class LevelColor(str, Enum):
    """Level colour tiers, in ascending difficulty/reward order."""
    AMARELO = "AMARELO"
    AZUL = "AZUL"
    VERDE = "VERDE"
    DOURADO = "DOURADO"


class ExerciseType(str, Enum):
    """Kinds of exercise a level can contain."""
    MULTIPLE_CHOICE = "multiple_choice"
    FILL_BLANK = "fill_blank"
    AUDIO = "audio"


class TransactionStatus(str, Enum):
    """Status of a shop transaction."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    """How a shop transaction was paid."""
    GOOGLE_PAY = "GOOGLE_PAY"
    DIAMONDS = "DIAMONDS"


class TrailStatus(str, Enum):
    """Derived per-user display status of a trail."""
    LOCKED = "locked"
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"


class LeaderboardRange(str, Enum):
    """Time window of a leaderboard."""
    WEEKLY = "weekly"
    ALL_TIME = "allTime"
