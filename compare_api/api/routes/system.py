"""System routes for the comparison API."""

from fastapi import APIRouter, Depends

from compare_api.infrastructure.health import get_health_status
from compare_api.infrastructure.rate_limit import RateLimiter, get_rate_limiter

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check(limiter: RateLimiter = Depends(get_rate_limiter)):
    """Health check with Supabase testing. Returns service status and dependency health."""
    return await get_health_status(rate_limit_windows=len(limiter))
