"""Repository implementations for the comparison API.

Implements Repository pattern with Dependency Inversion principle.
"""

from compare_api.infrastructure.database.repositories.base import BaseRepository
from compare_api.infrastructure.database.repositories.posts import PostRepository

__all__ = [
    "BaseRepository",
    "PostRepository",
]
