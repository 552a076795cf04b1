"""API module for the Story API.

Contains versioned API routers.
"""

from story_api.api.v1 import router as v1_router

__all__ = ["v1_router"]
