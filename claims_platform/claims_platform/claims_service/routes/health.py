"""
Health check endpoints for the claims service
"""
from fastapi import APIRouter, HTTPException, status
from datetime import datetime
from typing import Dict, Any

from ..db import check_db_connection

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Liveness plus database connectivity.

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    db_connected = check_db_connection()
    response = {
        "status": "healthy" if db_connected else "unhealthy",
        "database": "connected" if db_connected else "disconnected",
        "timestamp": datetime.utcnow().isoformat()
    }
    if not db_connected:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response)
    return response
