"""Health check route."""

from fastapi import APIRouter

from meter_reader.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict[str, str]:
    """Report that the service is up."""
    return {
        "status": "healthy",
        "service": "meter-reader",
        "version": settings.VERSION,
    }
