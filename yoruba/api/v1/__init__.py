"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from yoruba.api.v1.endpoints import (
    auth, users, paths, exercises, leaderboard, shop, admin
)

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(paths.router)
api_router.include_router(exercises.router)
api_router.include_router(leaderboard.router)
api_router.include_router(shop.router)
api_router.include_router(admin.router)
