"""FastAPI dependencies shared by the API routers."""

from __future__ import annotations

from fastapi import Request

from story_api.stories.service import StoryService


def get_story_service(request: Request) -> StoryService:
    """Return the story service built at application startup."""
    return request.app.state.story_service
