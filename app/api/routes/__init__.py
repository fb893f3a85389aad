"""
API routes initialization.

This module aggregates all router modules into a single API router.
"""

from fastapi import APIRouter

from app.api.routes.comments import router as comments_router
from app.api.routes.diff import router as diff_router
from app.api.routes.git import router as git_router
from app.api.routes.health import router as health_router
from app.api.routes.reviews import router as reviews_router
from app.api.routes.todos import router as todos_router

# Create the main API router and include all sub-routers
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(git_router, prefix="/api/git", tags=["git"])
api_router.include_router(diff_router, prefix="/api/diff", tags=["diff"])
api_router.include_router(reviews_router, prefix="/api/reviews", tags=["reviews"])
api_router.include_router(comments_router, prefix="/api", tags=["comments"])
api_router.include_router(todos_router, prefix="/api", tags=["todos"])
