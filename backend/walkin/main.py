"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from walkin.config import get_settings
from walkin.infrastructure.database import Base, engine
from walkin.infrastructure.logging.log_config import setup_logging
from walkin.presentation.api.v1.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Set up logging and the schema, make sure the media root exists."""
    settings = get_settings()
    setup_logging(settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")

    Path(settings.media_root).mkdir(parents=True, exist_ok=True)

    if not settings.token_verify_signature:
        logger.warning("TOKEN_VERIFY_SIGNATURE is off; bearer token claims are not verified")

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
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "walkin.main:app",
        host="0.0.0.0",
        port=8080,
        reload=get_settings().app_env == "development",
    )
