"""Image storage gateway for the comparison API.

Uploads, removes and resolves public URLs for post images in a Supabase
Storage bucket. Objects live under "<user_id>/" so each owner has a namespace.
"""

import re
import time
from typing import List, Optional

from compare_api.config import config
from compare_api.core.errors import UpstreamFailure
from compare_api.core.logging import logger
from compare_api.core.validation import sanitize_file_name
from compare_api.infrastructure.database.client import SupabaseClient


class ImageStorage:
    """Gateway to the post images bucket."""

    def __init__(self, client: Optional[SupabaseClient] = None, bucket: Optional[str] = None):
        """Initialize storage gateway.

        Args:
            client: SupabaseClient instance (optional)
            bucket: Bucket name (defaults to SUPABASE_STORAGE_BUCKET)
        """
        self._client = client or SupabaseClient()
        self.bucket = bucket or config.storage_bucket()
        self._public_prefix = re.compile(
            r"^https?://[^/]+/storage/v1/object/public/" + re.escape(self.bucket) + r"/(.+)$"
        )

    @property
    def files(self):
        """Storage file API for the bucket."""
        return self._client.bucket(self.bucket)

    @staticmethod
    def build_path(user_id: str, label: str, filename: str, now: Optional[float] = None) -> str:
        """Object path for an upload: <user_id>/<label>-<epoch ms>-<file name>.

        Falls back to "image<ext>" when nothing of the client file name survives
        sanitizing.
        """
        timestamp = int((time.time() if now is None else now) * 1000)
        name = sanitize_file_name(filename)
        if not name or name.startswith("."):
            name = f"image{name}"
        return f"{user_id}/{label}-{timestamp}-{name}"

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Upload bytes to path.

        Raises:
            UpstreamFailure: storage rejected the upload
        """
        try:
            self.files.upload(path, data, {"content-type": content_type})
        except Exception as e:
            logger.error("image_upload_failed", path=path, error=str(e))
            raise UpstreamFailure("upload image", str(e)) from e

        logger.debug("image_uploaded", path=path, size=len(data))
        return path

    def public_url(self, path: str) -> str:
        """Publicly resolvable URL for an object."""
        try:
            url = self.files.get_public_url(path)
        except Exception as e:
            logger.error("image_public_url_failed", path=path, error=str(e))
            raise UpstreamFailure("resolve image URL", str(e)) from e

        return url.rstrip("?")

    def remove(self, paths: List[str]) -> None:
        """Delete objects.

        Raises:
            UpstreamFailure: storage rejected the removal
        """
        if not paths:
            return

        try:
            self.files.remove(paths)
        except Exception as e:
            raise UpstreamFailure("remove images", str(e)) from e

    def path_from_public_url(self, url: Optional[str]) -> Optional[str]:
        """Recover the object path from a public URL of this bucket.

        Returns:
            Object path, or None if the URL does not point into this bucket
        """
        if not url:
            return None

        match = self._public_prefix.match(url.split("?", 1)[0])
        return match.group(1) if match else None
