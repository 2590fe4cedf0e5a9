"""
Trails endpoint.
"""
from fastapi import APIRouter, Depends

from yoruba.api.v1.endpoints.dependencies import get_content_repository, get_progress_store
from yoruba.core.exceptions import NotFoundError
from yoruba.repositories.sql import SqlContentRepository, SqlProgressStore
from yoruba.schemas.path import PathLevelResponse, PathResponse, PathsResponse
from yoruba.services.trail_service import get_user_trails

router = APIRouter(prefix="/paths", tags=["paths"])


@router.get("", response_model=PathsResponse)
async def get_paths(
    user_id: int,
    content: SqlContentRepository = Depends(get_content_repository),
    progress: SqlProgressStore = Depends(get_progress_store)
):
    """Trails with their levels and the user's status on each."""
    if not progress.get_user_resources(user_id):
        raise NotFoundError(f"User with id {user_id} not found")

    views = get_user_trails(content, progress, user_id)
    return PathsResponse(trails=[
        PathResponse(
            id=view.trail.id,
            name=view.trail.name,
            theme=view.trail.theme,
            order=view.trail.order,
            status=view.status,
            levels=[
                PathLevelResponse(
                    id=level_view.level.id,
                    name=level_view.level.name,
                    color=level_view.level.color,
                    xp=level_view.level.xp,
                    order=level_view.level.order,
                    completed=level_view.completed,
                    current=level_view.current
                )
                for level_view in view.levels
            ]
        )
        for view in views
    ])
