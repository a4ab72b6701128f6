"""
Health check endpoints.
"""

from fastapi import APIRouter

from harmonograph.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    System health check endpoint.

    Returns system status and basic diagnostics.
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.env,
        "canvas": {
            "width": settings.canvas_width,
            "height": settings.canvas_height
        }
    }
