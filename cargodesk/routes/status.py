"""
CargoDesk - Status Endpoints

This module contains the health check endpoint.
"""

from datetime import datetime, timezone
from fastapi import APIRouter

import cargodesk
from cargodesk.config import GetSettings


# Create router instance
router = APIRouter()


# ==================== Health Check Endpoint ====================

@router.get("/health", tags=["Status"])
async def health_check():
    """
    Health check endpoint to verify the admin server is running

    Returns:
        dict: Server status information
    """
    return {
        "status": "healthy",
        "service": GetSettings().app_name,
        "version": cargodesk.__version__,
        "timestamp_utc": datetime.now(timezone.utc).isoformat()
    }
