"""Applytics - job application tracker and analytics engine."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from applytics.core.config import settings
from applytics.core.storage import init_models
from applytics.routers import (
    analytics_router,
    applications_router,
    catalog_router,
    history_router,
    import_router,
    settings_router,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Initializing database...")
    await init_models()
    logger.info("Application initialized")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="Applytics",
    description="Job application tracking and analytics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(applications_router)
app.include_router(history_router)
app.include_router(import_router)
app.include_router(catalog_router)
app.include_router(settings_router)
app.include_router(analytics_router)


@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "message": "Applytics API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "active",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "applytics",
    }
