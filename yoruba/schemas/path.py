"""
Trail (learning path) schemas.
"""
from pydantic import BaseModel
from typing import List

from yoruba.models.enums import LevelColor, TrailStatus


class PathLevelResponse(BaseModel):
    """Level with the user's flags."""
    id: int
    name: str
    color: LevelColor
    xp: int
    order: int
    completed: bool = False
    current: bool = False


class PathResponse(BaseModel):
    """Trail with its derived status for the user."""
    id: int
    name: str
    theme: str
    order: int
    status: TrailStatus
    levels: List[PathLevelResponse]


class PathsResponse(BaseModel):
    """Response schema for the trails list."""
    trails: List[PathResponse]
