"""
Leaderboard schemas.
"""
from pydantic import BaseModel
from typing import List

from yoruba.models.enums import LeaderboardRange


class LeaderboardEntryResponse(BaseModel):
    user_id: int
    username: str
    xp: int
    rank: int

    class Config:
        from_attributes = True


class LeaderboardResponse(BaseModel):
    time_range: LeaderboardRange
    entries: List[LeaderboardEntryResponse]
