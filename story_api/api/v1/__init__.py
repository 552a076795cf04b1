"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from story_api.api.v1.stories import router as stories_router

router = APIRouter(prefix="/api/v1")
router.include_router(stories_router)

__all__ = ["router"]
