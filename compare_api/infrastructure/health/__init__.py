"""Health check module for the comparison API."""

from compare_api.infrastructure.health.checks import check_supabase_connection
from compare_api.infrastructure.health.endpoints import get_health_status

__all__ = ["get_health_status", "check_supabase_connection"]
