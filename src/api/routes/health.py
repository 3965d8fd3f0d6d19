"""
Health check API route
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from config.settings import ADMIN_API_BASE, ENV

router = APIRouter()

@router.get("/health")
async def health_check():
    """
    Liveness probe.

    The record store is not called; the console holds no state of its own
    and every page fetches fresh data.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ENV,
        "record_store": ADMIN_API_BASE,
    }
