#!/usr/bin/env python3
"""
Price Archive API - bulk import/export of price records as zipped CSV.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from api.middleware.logging import LoggingMiddleware
from api.routers import health, prices
from db.session import dispose_engine, init_db, wait_for_db

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper()))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wait for the database and make sure the prices table exists."""
    wait_for_db()
    init_db()
    logger.info(f"{settings.project_name} {settings.version} started")
    yield
    dispose_engine()


# Create FastAPI app
app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    description="Bulk import and export of price records packaged as zipped CSV",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=settings.allowed_methods,
    allow_headers=settings.allowed_headers,
)
app.add_middleware(LoggingMiddleware)

# Expose health checks both at root and versioned paths
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(prices.router, prefix=settings.api_prefix)
logger.info(f"Health and prices routers included under {settings.api_prefix}")


@app.get("/healthz")
async def root_health_check():
    """Root-level health endpoint for external monitors."""
    return await health.health_check()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
