"""Post routes for the comparison API - the caller's own posts.

Each handler runs: authenticate (401), rate limit (429), validate (400),
then execute through PostService (2xx, 404, 500).
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from compare_api.api.dependencies import get_post_service
from compare_api.api.models import PostUpdateRequest
from compare_api.config import config
from compare_api.core.errors import InvalidInput
from compare_api.core.logging import logger
from compare_api.core.posts import PostService
from compare_api.core.validation import (
    MAX_IMAGE_BYTES,
    ImageFile,
    validate_all_inputs,
    validate_post_id,
)
from compare_api.infrastructure.auth import AuthenticatedUser, require_user
from compare_api.infrastructure.rate_limit import OperationClass, enforce_rate_limit

router = APIRouter(tags=["Posts"])


async def _read_image(upload: UploadFile) -> ImageFile:
    # One byte past the limit is enough for the size check to reject it
    data = await upload.read(MAX_IMAGE_BYTES + 1)
    return ImageFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
    )


async def _read_update(request: Request) -> PostUpdateRequest:
    """Parse the PATCH body once the caller is authenticated and admitted."""
    try:
        body = await request.json()
    except ValueError:
        raise InvalidInput("Invalid request", ["Body must be valid JSON"])

    if not isinstance(body, dict):
        raise InvalidInput("Invalid request", ["Body must be a JSON object"])

    try:
        return PostUpdateRequest.model_validate(body)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        raise InvalidInput("Invalid request", errors)


def _require_post_id(post_id: Optional[str]) -> str:
    if not post_id:
        raise InvalidInput("Post ID is required")

    result = validate_post_id(post_id)
    if not result.is_valid:
        raise InvalidInput(result.errors[0], result.errors)

    return post_id


@router.get("/posts")
async def list_posts(
    user: AuthenticatedUser = Depends(require_user),
    _: None = Depends(enforce_rate_limit(OperationClass.READ)),
    service: PostService = Depends(get_post_service),
):
    """List the caller's posts, newest first. An empty list is a normal result."""
    posts = await service.list_posts(user.id)
    return JSONResponse(content=[post.to_dict() for post in posts])


@router.post("/posts", status_code=201)
async def create_post(
    user: AuthenticatedUser = Depends(require_user),
    _: None = Depends(enforce_rate_limit(OperationClass.UPLOAD)),
    service: PostService = Depends(get_post_service),
    before: Optional[UploadFile] = File(None),
    after: Optional[UploadFile] = File(None),
    caption: Optional[str] = Form(None),
):
    """Create a post from two images.

    - **before**: Before image (JPEG, PNG or WebP, 1 KB to 10 MB)
    - **after**: After image (same constraints)
    - **caption**: Optional caption, up to 500 characters, no < > " ' &
    """
    if before is None or after is None:
        raise InvalidInput("Missing before or after image")

    before_image = await _read_image(before)
    after_image = await _read_image(after)
    caption = (caption or "").strip() or None

    result = validate_all_inputs(
        before=before_image,
        after=after_image,
        caption=caption,
        allow_gif=config.allow_gif_uploads(),
    )
    if not result.is_valid:
        logger.info("post_create_rejected", user_id=user.id, errors=result.errors)
        raise InvalidInput("Invalid post", result.errors)

    if result.warnings:
        logger.info("post_create_warnings", user_id=user.id, warnings=result.warnings)

    await service.create_post(user.id, before_image, after_image, caption)

    return JSONResponse(status_code=201, content={"message": "Post created successfully"})


@router.patch(
    "/posts",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": PostUpdateRequest.model_json_schema()}},
        }
    },
)
async def update_post(
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
    _: None = Depends(enforce_rate_limit(OperationClass.UPDATE)),
    service: PostService = Depends(get_post_service),
):
    """Set is_favorite and/or is_shared on one of the caller's posts.

    Echoes back only the fields that were written.
    """
    payload = await _read_update(request)
    post_id = _require_post_id(payload.post_id)
    updated = await service.update_post(user.id, post_id, payload.update_fields())
    return JSONResponse(content={"message": "Post updated", **updated})


@router.delete("/posts")
async def delete_post(
    user: AuthenticatedUser = Depends(require_user),
    _: None = Depends(enforce_rate_limit(OperationClass.DELETE)),
    service: PostService = Depends(get_post_service),
    post_id: Optional[str] = Query(None, alias="id"),
):
    """Delete one of the caller's posts and its images.

    A post that does not exist and a post owned by someone else both answer 404.
    """
    post_id = _require_post_id(post_id)
    await service.delete_post(user.id, post_id)
    return JSONResponse(content={"message": "Post deleted successfully"})
