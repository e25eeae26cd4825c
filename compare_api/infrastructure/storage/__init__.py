"""Object storage for post images."""

from compare_api.infrastructure.storage.images import ImageStorage

__all__ = ["ImageStorage"]
