"""Health check functions for the comparison API.

Tests connectivity to Supabase (posts table and images bucket).
"""

import asyncio
from typing import Any, Dict

from compare_api.config import config
from compare_api.infrastructure.database import SupabaseClient


async def check_supabase_connection() -> Dict[str, Any]:
    """Test Supabase connectivity with minimal query.

    Returns:
        Dict with status ("healthy", "unconfigured", "timeout", "unavailable")
        and optional error message
    """
    try:
        missing = config.get_missing_config()
        if missing:
            return {"status": "unconfigured", "error": f"Missing: {', '.join(missing)}"}

        client = SupabaseClient()

        await asyncio.wait_for(
            asyncio.to_thread(lambda: client.table("posts").select("id").limit(1).execute()),
            timeout=2.0,
        )

        return {"status": "healthy", "database": "connected", "bucket": config.storage_bucket()}

    except asyncio.TimeoutError:
        return {"status": "timeout", "error": "Request timed out after 2s"}

    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}
