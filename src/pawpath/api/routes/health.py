"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/config", status_code=status.HTTP_200_OK)
def health_config() -> dict:
    """Engine constants currently in effect."""
    return {
        "walking_speed_mph": settings.walking_speed_mph,
        "pickup_service_minutes": settings.pickup_service_minutes,
        "dropoff_service_minutes": settings.dropoff_service_minutes,
        "default_walk_duration_minutes": settings.default_walk_duration_minutes,
        "first_weekday": settings.first_weekday,
        "max_range_days": settings.max_range_days,
    }
