"""Nomad Service - FastAPI Application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.graphql import register
from .config import get_settings
from .database import close_database, init_database
from .repositories import EntityService

logger = logging.getLogger("nomad_service")


def setup_logging(level: str) -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting {settings.service_name} v{settings.service_version}")

    await init_database()
    logger.info("Database connected")

    yield

    # Shutdown
    await close_database()
    logger.info("Database disconnected")


settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(
    title="Nomad Service",
    description="GraphQL extension for slots, contacts and power-ups",
    version=settings.service_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GraphQL
register(app, EntityService())


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "graphql": settings.graphql_path,
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nomad_service.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
