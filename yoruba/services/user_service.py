"""
User service for business logic related to user accounts.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from sqlmodel import Session, select, func
from typing import Dict, Any, Optional

from yoruba.core.config import settings
from yoruba.core.exceptions import ConflictError, AuthenticationError, NotFoundError
from yoruba.models.models import User, UserLevel, UserExercise, Level, Trail, UserRole

logger = logging.getLogger(__name__)


def register_user(
    session: Session,
    username: str,
    password: str,
    email: Optional[str] = None,
    role: UserRole = UserRole.USER
) -> User:
    """
    Create an account with full lives and empty balances.

    Raises:
        ConflictError: If the username is taken
    """
    existing_user = session.exec(select(User).where(User.username == username)).first()
    if existing_user:
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        email=email,
        password=User.hash_password(password),
        role=role,
        xp=0,
        diamonds=0,
        lives=settings.max_lives,
        next_life_at=None
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info(f"Registered user {user.id} ({username})")
    return user


def authenticate_user(session: Session, username: str, password: str) -> User:
    """
    Look a user up by username or email and check the password.

    Raises:
        AuthenticationError: Unknown user or wrong password
    """
    user = session.exec(
        select(User).where((User.username == username) | (User.email == username))
    ).first()
    if not user or not user.verify_password(password):
        raise AuthenticationError("Invalid username or password")
    return user


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def get_user_stats(session: Session, user_id: int) -> Dict[str, Any]:
    """
    Profile statistics for a user.

    Returns:
        Dict with xp, diamonds, lives, completed_levels, correct_answers and
        current_level (None, or a dict with id, name, color and trail_name)
    """
    user = get_user(session, user_id)

    completed_levels = session.exec(
        select(func.count(UserLevel.id)).where(
            UserLevel.user_id == user_id,
            UserLevel.completed == True  # noqa: E712
        )
    ).one()
    correct_answers = session.exec(
        select(func.count(UserExercise.id)).where(
            UserExercise.user_id == user_id,
            UserExercise.correct == True  # noqa: E712
        )
    ).one()

    current_level = None
    if user.current_level_id is not None:
        level = session.get(Level, user.current_level_id)
        if level:
            trail = session.get(Trail, level.trail_id)
            current_level = {
                'id': level.id,
                'name': level.name,
                'color': level.color,
                'trail_name': trail.name if trail else None
            }

    return {
        'xp': user.xp,
        'diamonds': user.diamonds,
        'lives': user.lives,
        'completed_levels': completed_levels,
        'correct_answers': correct_answers,
        'current_level': current_level
    }


def delete_user(session: Session, user_id: int) -> None:
    """Delete a user together with their progress, attempts and transactions."""
    user = get_user(session, user_id)
    session.delete(user)
    session.commit()
    logger.info(f"Deleted user {user_id}")
