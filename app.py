import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.config import get_settings, validate_settings
from src.dependencies import close_services
from src.exceptions import register_exception_handlers
from src.routers import health_router, webhooks_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration on startup, release HTTP clients on shutdown."""
    validate_settings(get_settings())
    yield
    # Cleanup on shutdown
    await close_services()


app = FastAPI(title="ElevenLabs Call Mailer", lifespan=lifespan)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(webhooks_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))
