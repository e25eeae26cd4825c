"""Base repository interface for the comparison API.

Implements Repository pattern with Dependency Inversion principle.
All concrete repositories inherit from BaseRepository.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from compare_api.infrastructure.database.client import SupabaseClient

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository for database operations.

    Provides dependency inversion - depend on repository interface, not concrete tables.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        """Initialize repository with Supabase client."""
        self._client: SupabaseClient = client or SupabaseClient()

    def table(self):
        """Query builder for this repository's table."""
        return self._client.table(self.table_name())

    @abstractmethod
    def table_name(self) -> str:
        """Return the table name this repository manages."""
        pass
