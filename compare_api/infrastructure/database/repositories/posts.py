"""Posts repository for the comparison API.

Handles CRUD operations on the posts table. Every query on a user's rows
filters by user_id on top of the row-level security enforced by Supabase.
"""

from typing import Any, Dict, List, Optional

from compare_api.core.errors import UpstreamFailure
from compare_api.core.logging import logger
from compare_api.infrastructure.database.models import Post
from compare_api.infrastructure.database.repositories.base import BaseRepository

POST_COLUMNS = (
    "id, created_at, user_id, before_image_url, after_image_url, caption, is_favorite, is_shared"
)


class PostRepository(BaseRepository[Post]):
    """Repository for the posts table."""

    def table_name(self) -> str:
        """Return table name."""
        return "posts"

    def list_for_owner(self, user_id: str) -> List[Post]:
        """List all posts owned by a user.

        Args:
            user_id: Owner UUID

        Returns:
            Posts ordered by created_at DESC (empty list if none)

        Raises:
            UpstreamFailure: query failed
        """
        try:
            result = (
                self.table()
                .select(POST_COLUMNS)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("posts_fetch_failed", user_id=user_id, error=str(e))
            raise UpstreamFailure("fetch posts", str(e)) from e

        return [Post.from_row(row) for row in result.data or []]

    def get_owned(self, post_id: str, user_id: str) -> Optional[Post]:
        """Get a post only if it belongs to user_id.

        Returns:
            Post, or None when absent or owned by someone else
        """
        try:
            result = (
                self.table()
                .select(POST_COLUMNS)
                .eq("id", post_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("post_fetch_failed", post_id=post_id, user_id=user_id, error=str(e))
            raise UpstreamFailure("fetch post", str(e)) from e

        if not result.data:
            return None
        return Post.from_row(result.data[0])

    def get_by_id(self, post_id: str) -> Optional[Post]:
        """Get a post regardless of owner. Used by the share view only."""
        try:
            result = self.table().select(POST_COLUMNS).eq("id", post_id).limit(1).execute()
        except Exception as e:
            logger.error("post_fetch_failed", post_id=post_id, error=str(e))
            raise UpstreamFailure("fetch post", str(e)) from e

        if not result.data:
            return None
        return Post.from_row(result.data[0])

    def create(
        self,
        user_id: str,
        before_image_url: str,
        after_image_url: str,
        caption: Optional[str] = None,
    ) -> Optional[Post]:
        """Insert a new post row.

        Args:
            user_id: Owner UUID
            before_image_url: Public URL of the before image
            after_image_url: Public URL of the after image
            caption: Optional caption

        Returns:
            Created Post, or None if the store returned no representation

        Raises:
            UpstreamFailure: insert failed
        """
        try:
            result = (
                self.table()
                .insert(
                    {
                        "user_id": user_id,
                        "before_image_url": before_image_url,
                        "after_image_url": after_image_url,
                        "caption": caption,
                    }
                )
                .execute()
            )
        except Exception as e:
            logger.error("post_create_failed", user_id=user_id, error=str(e))
            raise UpstreamFailure("create post", str(e)) from e

        if not result.data:
            return None
        return Post.from_row(result.data[0])

    def update_flags(self, post_id: str, user_id: str, fields: Dict[str, Any]) -> None:
        """Write is_favorite / is_shared on a post owned by user_id."""
        try:
            self.table().update(fields).eq("id", post_id).eq("user_id", user_id).execute()
        except Exception as e:
            logger.error(
                "post_update_failed",
                post_id=post_id,
                user_id=user_id,
                fields=sorted(fields),
                error=str(e),
            )
            raise UpstreamFailure("update post", str(e)) from e

    def delete_owned(self, post_id: str, user_id: str) -> None:
        """Delete a post row owned by user_id."""
        try:
            self.table().delete().eq("id", post_id).eq("user_id", user_id).execute()
        except Exception as e:
            logger.error("post_delete_failed", post_id=post_id, user_id=user_id, error=str(e))
            raise UpstreamFailure("delete post", str(e)) from e
