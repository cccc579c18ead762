"""
API routers for endpoint organization.
"""
from .health import router as health_router
from .webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "webhooks_router",
]
