"""
Leaderboard aggregation.

allTime ranks users by their XP total. weekly sums, for every correct
attempt in the trailing seven days, the XP of the attempted exercise's
level; replaying exercises of a level keeps adding that level's XP.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from yoruba.core.clock import Clock, utcnow
from yoruba.models.enums import LeaderboardRange
from yoruba.repositories.base import ContentRepository, ProgressStore

logger = logging.getLogger(__name__)

WEEKLY_WINDOW = timedelta(days=7)


@dataclass
class LeaderboardEntry:
    user_id: int
    username: str
    xp: int
    rank: int


def _rank(scores: List[Tuple[int, str, int]], limit: Optional[int]) -> List[LeaderboardEntry]:
    """Sort (user_id, username, score) by score desc then user id, keep score > 0, rank 1..n."""
    ordered = sorted(
        (row for row in scores if row[2] > 0),
        key=lambda row: (-row[2], row[0])
    )
    if limit is not None:
        ordered = ordered[:limit]
    return [
        LeaderboardEntry(user_id=user_id, username=username, xp=score, rank=position)
        for position, (user_id, username, score) in enumerate(ordered, start=1)
    ]


def all_time_leaderboard(progress: ProgressStore, limit: Optional[int] = None) -> List[LeaderboardEntry]:
    return _rank(
        [(user.user_id, user.username, user.xp) for user in progress.list_user_resources()],
        limit
    )


def weekly_leaderboard(
    content: ContentRepository,
    progress: ProgressStore,
    clock: Clock = utcnow,
    limit: Optional[int] = None
) -> List[LeaderboardEntry]:
    since = clock() - WEEKLY_WINDOW
    level_xp_by_exercise: Dict[int, int] = {}
    scores: Dict[int, int] = {}

    for attempt in progress.get_correct_attempts_since(since):
        if attempt.exercise_id not in level_xp_by_exercise:
            exercise = content.get_exercise(attempt.exercise_id)
            level = content.get_level(exercise.level_id) if exercise else None
            level_xp_by_exercise[attempt.exercise_id] = level.xp if level else 0
        scores[attempt.user_id] = scores.get(attempt.user_id, 0) + level_xp_by_exercise[attempt.exercise_id]

    users = {user.user_id: user for user in progress.list_user_resources()}
    rows = [
        (user_id, users[user_id].username, score)
        for user_id, score in scores.items()
        if user_id in users
    ]
    logger.debug(f"Weekly leaderboard since {since.isoformat()}: {len(rows)} scored users")
    return _rank(rows, limit)


def get_leaderboard(
    content: ContentRepository,
    progress: ProgressStore,
    time_range: LeaderboardRange,
    clock: Clock = utcnow,
    limit: Optional[int] = None
) -> List[LeaderboardEntry]:
    """Ranked standings for the requested range."""
    if LeaderboardRange(time_range) == LeaderboardRange.WEEKLY:
        return weekly_leaderboard(content, progress, clock, limit)
    return all_time_leaderboard(progress, limit)
