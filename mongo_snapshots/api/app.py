"""FastAPI application for mongo-snapshots."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from mongo_snapshots import BackupManager, BackupConfig
from mongo_snapshots._utils import setup_logging
from .config import settings
from .routers import backups

# App-managed logging keeps progress lines visible under uvicorn's config
if os.getenv("DISABLE_APP_LOGGING", "false").lower() != "true":
    setup_logging(logging.INFO)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the backup manager from the environment."""
    logger.info("Initializing backup manager...")

    try:
        app.state.backup_manager = BackupManager(BackupConfig.from_env())
        logger.info("Backup manager initialized")
    except Exception as e:
        logger.error(f"Failed to initialize backup manager: {e}")
        raise

    yield

    logger.info("Shutting down backup API...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(backups.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "docs": f"{settings.api_prefix}/docs"
        }

    return app


# Create default app instance
app = create_app()
