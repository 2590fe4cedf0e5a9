"""
Custom exceptions for the application.
"""
from datetime import datetime
from typing import Optional


class YorubaException(Exception):
    """Base exception for all Yoruba application exceptions."""
    pass


class ValidationError(YorubaException):
    """Raised when validation fails."""
    pass


class NotFoundError(YorubaException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(YorubaException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class AuthenticationError(YorubaException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(YorubaException):
    """Raised when authorization fails."""
    pass


class LevelLockedError(YorubaException):
    """Raised when a level is accessed before its prerequisite level is completed."""

    def __init__(self, level_id: int, message: Optional[str] = None):
        self.level_id = level_id
        super().__init__(message or "You need to complete the previous level first")


class OutOfLivesError(YorubaException):
    """Raised when the user has no lives left; carries the regeneration deadline."""

    def __init__(self, next_life_at: Optional[datetime], message: Optional[str] = None):
        self.next_life_at = next_life_at
        super().__init__(message or "No lives left")


class InsufficientLivesError(YorubaException):
    """Raised when a life is spent while the balance is already zero.

    Callers check for OutOfLivesError first, so seeing this outside the
    services layer means a broken contract.
    """
    pass


class ExerciseLevelMismatchError(ValidationError):
    """Raised when a submitted exercise does not belong to the submitted level."""
    pass


class InsufficientDiamondsError(YorubaException):
    """Raised when a purchase costs more diamonds than the user holds."""
    pass
