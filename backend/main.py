"""
Main module for the FastAPI application.
"""
import os
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.__version__ import __version__
from app.core.config import settings
from app.db.session import engine
from app.api.v1.posts import router as posts_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Setup logging
logger = logging.getLogger(__name__)


# Lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler - runs on startup and shutdown.
    """
    logger.info(f"Post service {__version__} starting (timezone={settings.TIMEZONE})")
    if os.getenv("DATABASE_URL"):
        logger.info("Database: Using DATABASE_URL")
    else:
        logger.info("Database: Using DB_* env vars")

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Post service shutting down")


app = FastAPI(
    title="Post Service API",
    description="Posts, per-user listings and daily feeds",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
if settings.CORS_ORIGINS:
    origins = settings.CORS_ORIGINS if isinstance(settings.CORS_ORIGINS, list) else [settings.CORS_ORIGINS]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(posts_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


if __name__ == "__main__":
    """
    Run the application directly.
    """
    import uvicorn

    port = int(os.getenv("API_PORT", settings.API_PORT))
    host = os.getenv("API_HOST", settings.API_HOST)

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
    )
