from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from catalog_service.api.dependencies import get_db_client
from catalog_service.core.config import Settings, get_settings
from catalog_service.infrastructure.database.mongodb.client import MongoDBClient

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    response_description="Service health status"
)
def get_health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        Dict: Basic service health information
    """
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get(
    "/detailed",
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    response_description="Service health status including the database"
)
def get_detailed_health(
    settings: Settings = Depends(get_settings),
    db_client: MongoDBClient = Depends(get_db_client)
) -> Dict[str, Any]:
    """
    Detailed health check endpoint including database status.

    Returns:
        Dict: Detailed service health information
    """
    database = db_client.health_check()

    return {
        "status": "ok" if database["status"] == "ok" else "degraded",
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dependencies": {"database": database}
    }
