"""FastAPI application factory for the reconciliation server."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory.config import get_settings
from inventory.infrastructure.database import Base, engine
from inventory.infrastructure.database.session import ensure_sqlite_directory
from inventory.infrastructure.logging.log_config import setup_logging
from inventory.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and create tables."""
    settings = get_settings()
    setup_logging()

    ensure_sqlite_directory(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "Reconciliation server ready (tombstone policy: %s)",
        settings.tombstone_policy,
    )

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inventory.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
