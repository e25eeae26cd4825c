"""Post orchestration for the comparison API.

Sequences the Supabase calls behind each post operation. Repository and
storage calls are blocking, so they run in worker threads.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from compare_api.core.errors import InvalidInput, PostNotFound, UpstreamFailure
from compare_api.core.logging import logger
from compare_api.core.validation import ImageFile
from compare_api.infrastructure.database.models import Post
from compare_api.infrastructure.database.repositories import PostRepository
from compare_api.infrastructure.storage import ImageStorage

UPDATABLE_FIELDS = ("is_favorite", "is_shared")


class ShareLookupCategory(str, Enum):
    """Outcome of a public share lookup.

    - FOUND: post exists and is shared
    - NOT_FOUND: no post with this id
    - PRIVATE: post exists but is not shared
    - TRANSIENT: the store could not be reached; the caller may retry
    """

    FOUND = "found"
    NOT_FOUND = "not_found"
    PRIVATE = "private"
    TRANSIENT = "transient"


@dataclass
class SharedPostLookup:
    category: ShareLookupCategory
    post: Optional[Post] = None


class PostService:
    """Post use cases on top of the posts table and the images bucket."""

    def __init__(self, repository: PostRepository, storage: ImageStorage):
        self.repository = repository
        self.storage = storage

    async def list_posts(self, user_id: str) -> List[Post]:
        """All posts owned by user_id, newest first."""
        posts = await asyncio.to_thread(self.repository.list_for_owner, user_id)
        logger.info("posts_fetched", user_id=user_id, post_count=len(posts))
        return posts

    async def create_post(
        self,
        user_id: str,
        before: ImageFile,
        after: ImageFile,
        caption: Optional[str] = None,
    ) -> Optional[Post]:
        """Upload both images, then insert the row.

        Steps run in order: upload before, resolve its URL, upload after,
        resolve its URL, insert. A failure aborts the sequence and propagates.
        Images uploaded before the failing step are removed best-effort so a
        failed create does not leave orphaned objects behind.

        Args:
            user_id: Owner UUID
            before: Before image
            after: After image
            caption: Optional caption (already validated)

        Returns:
            Created Post, or None if the store did not return the row

        Raises:
            UpstreamFailure: any upload, URL resolution or insert failed
        """
        uploaded: List[str] = []
        try:
            before_path = self.storage.build_path(user_id, "before", before.filename)
            await asyncio.to_thread(
                self.storage.upload, before_path, before.data, before.content_type
            )
            uploaded.append(before_path)
            before_url = await asyncio.to_thread(self.storage.public_url, before_path)

            after_path = self.storage.build_path(user_id, "after", after.filename)
            await asyncio.to_thread(self.storage.upload, after_path, after.data, after.content_type)
            uploaded.append(after_path)
            after_url = await asyncio.to_thread(self.storage.public_url, after_path)

            post = await asyncio.to_thread(
                self.repository.create, user_id, before_url, after_url, caption
            )
        except UpstreamFailure:
            await self._discard_uploads(user_id, uploaded)
            raise

        logger.info(
            "post_created",
            user_id=user_id,
            before_image=before_path,
            after_image=after_path,
            has_caption=bool(caption),
        )
        return post

    async def _discard_uploads(self, user_id: str, paths: List[str]) -> None:
        if not paths:
            return
        try:
            await asyncio.to_thread(self.storage.remove, paths)
            logger.info("post_create_uploads_discarded", user_id=user_id, paths=paths)
        except UpstreamFailure as e:
            logger.warning(
                "post_create_cleanup_failed", user_id=user_id, paths=paths, error=e.detail
            )

    async def update_post(
        self, user_id: str, post_id: str, fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Write the provided flags on an owned post.

        Only keys in UPDATABLE_FIELDS with a non-None value are written, so
        repeating the same update leaves the row unchanged.

        Returns:
            The fields that were written

        Raises:
            InvalidInput: nothing to update
            UpstreamFailure: update failed
        """
        update_data = {
            key: value for key, value in fields.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        if not update_data:
            raise InvalidInput("No fields to update")

        await asyncio.to_thread(self.repository.update_flags, post_id, user_id, update_data)

        logger.info(
            "post_updated", post_id=post_id, user_id=user_id, updated_fields=sorted(update_data)
        )
        return update_data

    async def delete_post(self, user_id: str, post_id: str) -> int:
        """Delete an owned post and, best-effort, its images.

        Ownership is checked against the store rather than the request. A
        missing post and a post owned by someone else both raise PostNotFound.
        Image removal failures are logged and do not stop the row deletion.

        Returns:
            Number of image objects scheduled for removal

        Raises:
            PostNotFound: absent or not owned
            UpstreamFailure: fetch or row deletion failed
        """
        post = await asyncio.to_thread(self.repository.get_owned, post_id, user_id)
        if post is None:
            logger.warning("post_delete_not_found", post_id=post_id, user_id=user_id)
            raise PostNotFound()

        paths = [
            path
            for path in (
                self.storage.path_from_public_url(post.before_image_url),
                self.storage.path_from_public_url(post.after_image_url),
            )
            if path
        ]

        if paths:
            try:
                await asyncio.to_thread(self.storage.remove, paths)
            except UpstreamFailure as e:
                logger.warning(
                    "post_images_delete_failed",
                    post_id=post_id,
                    user_id=user_id,
                    paths=paths,
                    error=e.detail,
                )

        await asyncio.to_thread(self.repository.delete_owned, post_id, user_id)

        logger.info("post_deleted", post_id=post_id, user_id=user_id, files_deleted=len(paths))
        return len(paths)

    async def get_shared_post(self, post_id: str) -> SharedPostLookup:
        """Public lookup. Returns content only while the post is shared."""
        try:
            post = await asyncio.to_thread(self.repository.get_by_id, post_id)
        except UpstreamFailure as e:
            logger.warning("shared_post_fetch_failed", post_id=post_id, error=e.detail)
            return SharedPostLookup(ShareLookupCategory.TRANSIENT)

        if post is None:
            return SharedPostLookup(ShareLookupCategory.NOT_FOUND)
        if not post.is_shared:
            return SharedPostLookup(ShareLookupCategory.PRIVATE)
        return SharedPostLookup(ShareLookupCategory.FOUND, post)
