"""Health check endpoint handler for the comparison API.

Provides /health endpoint with dependency testing.
"""

from typing import Any, Dict

from compare_api import __version__
from compare_api.infrastructure.health.checks import check_supabase_connection


async def get_health_status(
    rate_limit_windows: int, service_name: str = "compare-api"
) -> Dict[str, Any]:
    """Get comprehensive health status.

    Args:
        rate_limit_windows: Number of active rate limit windows
        service_name: Service name for response

    Returns:
        Dict with overall status and dependency health
    """
    try:
        supabase_health = await check_supabase_connection()
    except Exception as e:
        supabase_health = {"status": "error", "error": str(e)}

    overall_status = "healthy" if supabase_health.get("status") == "healthy" else "degraded"

    return {
        "status": overall_status,
        "service": service_name,
        "version": __version__,
        "rate_limit_windows": rate_limit_windows,
        "dependencies": {"supabase": supabase_health},
    }
