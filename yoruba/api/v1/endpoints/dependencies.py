"""
Shared FastAPI dependencies: repositories and services bound to the request session.
"""
from fastapi import Depends
from sqlmodel import Session

from yoruba.core.database import get_session
from yoruba.repositories.sql import SqlContentRepository, SqlProgressStore
from yoruba.services.life_service import build_life_policy
from yoruba.services.progression_service import ProgressionEngine
from yoruba.services.shop_service import ShopService


def get_content_repository(session: Session = Depends(get_session)) -> SqlContentRepository:
    return SqlContentRepository(session)


def get_progress_store(session: Session = Depends(get_session)) -> SqlProgressStore:
    return SqlProgressStore(session)


def get_engine(
    content: SqlContentRepository = Depends(get_content_repository),
    progress: SqlProgressStore = Depends(get_progress_store)
) -> ProgressionEngine:
    return ProgressionEngine(content, progress, life_policy=build_life_policy())


def get_shop(progress: SqlProgressStore = Depends(get_progress_store)) -> ShopService:
    return ShopService(progress, life_policy=build_life_policy())
