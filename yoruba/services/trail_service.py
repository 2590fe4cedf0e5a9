"""
Per-user trail view with derived trail status.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from yoruba.models.enums import LevelColor, TrailStatus
from yoruba.repositories.base import ContentRepository, ProgressStore
from yoruba.schemas.records import TrailRecord, LevelRecord, LevelProgressRecord

logger = logging.getLogger(__name__)


@dataclass
class LevelView:
    level: LevelRecord
    completed: bool = False
    current: bool = False


@dataclass
class TrailView:
    trail: TrailRecord
    status: TrailStatus
    levels: List[LevelView] = field(default_factory=list)


def derive_trail_status(
    trail: TrailRecord,
    levels: List[LevelRecord],
    progress_by_level: Dict[int, LevelProgressRecord],
    previous_trail_levels: List[LevelRecord],
) -> TrailStatus:
    """
    Status of a trail for one user.

    in_progress wins as soon as any level of the trail is completed or
    current. Otherwise the first trail is active, a later trail is active
    once the previous trail's DOURADO level is completed, and everything
    else is locked.
    """
    for level in levels:
        progress = progress_by_level.get(level.id)
        if progress and (progress.completed or progress.current):
            return TrailStatus.IN_PROGRESS

    if trail.order == 1:
        return TrailStatus.ACTIVE

    for level in previous_trail_levels:
        if level.color != LevelColor.DOURADO:
            continue
        progress = progress_by_level.get(level.id)
        if progress and progress.completed:
            return TrailStatus.ACTIVE

    return TrailStatus.LOCKED


def get_user_trails(content: ContentRepository, progress: ProgressStore, user_id: int) -> List[TrailView]:
    """
    All trails with their levels, the user's flags on each level and the trail status.

    A level is current when the user's pointer names it, even before the
    level has a progress row (first level of a freshly unlocked trail).
    """
    progress_by_level = {
        record.level_id: record for record in progress.list_user_level_progress(user_id)
    }
    user = progress.get_user_resources(user_id)
    current_level_id = user.current_level_id if user else None
    trails = content.get_trails()
    levels_by_trail = {trail.id: content.get_levels_by_trail(trail.id) for trail in trails}
    trails_by_order = {trail.order: trail for trail in trails}

    views = []
    for trail in trails:
        levels = levels_by_trail[trail.id]
        previous_trail = trails_by_order.get(trail.order - 1)
        previous_levels = levels_by_trail[previous_trail.id] if previous_trail else []

        level_views = []
        for level in levels:
            record = progress_by_level.get(level.id)
            level_views.append(LevelView(
                level=level,
                completed=bool(record and record.completed),
                current=level.id == current_level_id,
            ))

        views.append(TrailView(
            trail=trail,
            status=derive_trail_status(trail, levels, progress_by_level, previous_levels),
            levels=level_views,
        ))
    return views
