"""Story API endpoints.

Endpoints:
    POST /api/v1/story - Create a story from JSON metadata
    PUT /api/v1/story/{id} - Replace all story files with a multipart upload
    PATCH /api/v1/story/{id} - Upload story files, keeping other files

Examples:
    >>> POST /api/v1/story
    >>> Authorization: Bearer <team token>
    >>> {"title": "Budget 2024", "tags": ["finance"]}
    >>>
    >>> # Response (201)
    >>> {"status": "created", "message": "created story with id '...'"}

Tests:
    - tests/integration/test_api_stories.py::TestCreateStory
    - tests/integration/test_api_stories.py::TestReplaceStory
    - tests/integration/test_api_stories.py::TestPatchStory
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Request, status
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from story_api.api.dependencies import get_story_service
from story_api.stories.errors import BadRequest
from story_api.stories.schemas import StoryResponse
from story_api.stories.service import StoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/story", tags=["stories"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": StoryResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": StoryResponse},
    status.HTTP_404_NOT_FOUND: {"model": StoryResponse},
    status.HTTP_409_CONFLICT: {"model": StoryResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": StoryResponse},
}


async def read_story_files(request: Request) -> dict[str, bytes]:
    """Read a multipart body into asset name to content.

    Each part name is the asset's file name. File parts and plain text
    parts are both accepted; for repeated names the first part wins.

    Raises:
        BadRequest: If the body is not a parseable multipart form.
    """
    content_type = request.headers.get("content-type", "").lower()
    if not content_type.startswith("multipart/form-data"):
        raise BadRequest("expected a multipart/form-data body")

    files: dict[str, bytes] = {}
    try:
        async with request.form() as form:
            for name, value in form.multi_items():
                if name in files:
                    continue
                if isinstance(value, UploadFile):
                    files[name] = await value.read()
                else:
                    files[name] = value.encode("utf-8")
    except (MultiPartException, StarletteHTTPException) as e:
        logger.error(f"Parsing multipart form failed: {e}")
        raise BadRequest("unable to parse multipart form") from e
    return files


@router.post(
    "",
    response_model=StoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_story(
    request: Request,
    authorization: str | None = Header(default=None),
    service: StoryService = Depends(get_story_service),
) -> StoryResponse:
    """Create a story from JSON metadata.

    The body may hold title, slug, tags and published. The id is
    generated and the team comes from the token; any id or team in the
    body is ignored. Only the metadata is stored; upload files with PUT.
    """
    body = await request.body()
    meta = await service.create(authorization, body)
    return StoryResponse(status="created", message=f"created story with id '{meta.id}'")


@router.put("/{story_id}", response_model=StoryResponse, responses=ERROR_RESPONSES)
async def replace_story(
    story_id: str,
    request: Request,
    authorization: str | None = Header(default=None),
    service: StoryService = Depends(get_story_service),
) -> StoryResponse:
    """Replace all files of a story.

    Every current file except the metadata is deleted, then the uploaded
    files are written. A failure part way leaves the story as far as it
    got.
    """
    meta = await service.authorize_update(story_id, authorization)
    files = await read_story_files(request)
    await service.replace_files(meta, files)
    return StoryResponse(status="updated", message=f"updated story {meta.slug}")


@router.patch("/{story_id}", response_model=StoryResponse, responses=ERROR_RESPONSES)
async def patch_story(
    story_id: str,
    request: Request,
    authorization: str | None = Header(default=None),
    service: StoryService = Depends(get_story_service),
) -> StoryResponse:
    """Upload files to a story, overwriting same-named files only."""
    meta = await service.authorize_update(story_id, authorization)
    files = await read_story_files(request)
    await service.patch_files(meta, files)
    return StoryResponse(status="updated", message=f"updated story {meta.slug}")
