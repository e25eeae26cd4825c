"""Supabase client singleton for the comparison API.

One lazily created client shared by the post repository, the image storage
gateway and the health check.
"""

from typing import Optional

from supabase import Client, create_client

from compare_api.config import config
from compare_api.core.logging import logger


class SupabaseClient:
    """Singleton wrapper around supabase.Client with lazy initialization."""

    _instance: Optional["SupabaseClient"] = None
    _client: Optional[Client] = None

    def __new__(cls):
        """Ensure only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def client(self) -> Client:
        """Get Supabase client, initializing if needed.

        Raises:
            RuntimeError: SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY missing
        """
        if self._client is None:
            url = config.supabase_url()
            key = config.supabase_service_role_key()

            if not url or not key:
                raise RuntimeError(
                    "Supabase not configured. Set SUPABASE_URL and "
                    "SUPABASE_SERVICE_ROLE_KEY environment variables."
                )

            self._client = create_client(url, key)
            logger.info("supabase_client_initialized", url=url)

        return self._client

    def table(self, name: str):
        """PostgREST query builder for a table."""
        return self.client.table(name)

    def bucket(self, name: str):
        """Storage file API for a bucket."""
        return self.client.storage.from_(name)

    @classmethod
    def reset(cls) -> None:
        """Forget the cached client so the next access re-reads configuration."""
        if cls._instance is not None:
            cls._instance._client = None
