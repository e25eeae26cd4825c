"""Public share view for the comparison API."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from compare_api.api.dependencies import get_post_service
from compare_api.core.posts import PostService, ShareLookupCategory
from compare_api.core.validation import validate_post_id
from compare_api.infrastructure.rate_limit import OperationClass, enforce_rate_limit

router = APIRouter(tags=["Share"])

_FAILURES = {
    ShareLookupCategory.NOT_FOUND: (404, "Post not found or no longer available"),
    ShareLookupCategory.PRIVATE: (404, "This post is not shared"),
    ShareLookupCategory.TRANSIENT: (503, "Post is temporarily unavailable. Please try again."),
}


def _failure(category: ShareLookupCategory) -> JSONResponse:
    status_code, message = _FAILURES[category]
    return JSONResponse(
        status_code=status_code, content={"error": message, "category": category.value}
    )


@router.get("/share/{post_id}")
async def get_shared_post(
    post_id: str,
    _read: None = Depends(enforce_rate_limit(OperationClass.READ)),
    _burst: None = Depends(enforce_rate_limit(OperationClass.BURST)),
    service: PostService = Depends(get_post_service),
):
    """Read a shared post without authentication.

    Failures are reported only as a category: not_found, private or transient.
    """
    if not validate_post_id(post_id).is_valid:
        return _failure(ShareLookupCategory.NOT_FOUND)

    lookup = await service.get_shared_post(post_id)
    if lookup.category is not ShareLookupCategory.FOUND:
        return _failure(lookup.category)

    return JSONResponse(content=lookup.post.public_dict())
