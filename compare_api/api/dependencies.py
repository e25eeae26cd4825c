"""FastAPI dependencies for the comparison API.

Dependency injection functions for route handlers. Tests replace these via
app.dependency_overrides.
"""

from fastapi import Depends

from compare_api.core.posts import PostService
from compare_api.infrastructure.database.repositories import PostRepository
from compare_api.infrastructure.storage import ImageStorage


def get_post_repository() -> PostRepository:
    """Dependency to get PostRepository instance."""
    return PostRepository()


def get_image_storage() -> ImageStorage:
    """Dependency to get ImageStorage instance."""
    return ImageStorage()


def get_post_service(
    repository: PostRepository = Depends(get_post_repository),
    storage: ImageStorage = Depends(get_image_storage),
) -> PostService:
    """Dependency to get PostService wired to the Supabase gateways."""
    return PostService(repository, storage)
