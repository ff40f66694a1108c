"""API routes."""

from fastapi import APIRouter

from topstories.routes import stories

api_router = APIRouter()

# Public story endpoints (read view + manual refresh)
api_router.include_router(stories.router, tags=["stories"])
