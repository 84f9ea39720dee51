"""
Liveness endpoint
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """Report service status for load balancers"""
    settings = request.app.state.settings
    logger.debug("health_check_requested")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.APP_NAME,
        "version": settings.VERSION
    }
