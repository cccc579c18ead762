"""
Health check router.
"""
from fastapi import APIRouter

from src.config import ENVIRONMENT

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Liveness probe. The service keeps no state, so being up is being healthy."""
    return {"status": "healthy", "service": "convai-call-mailer", "environment": ENVIRONMENT}
