"""Database module for the comparison API.

Provides the Supabase client singleton and the posts repository.
"""

from compare_api.infrastructure.database.client import SupabaseClient
from compare_api.infrastructure.database.models import Post
from compare_api.infrastructure.database.repositories import BaseRepository, PostRepository

__all__ = [
    "SupabaseClient",
    "Post",
    "BaseRepository",
    "PostRepository",
]
