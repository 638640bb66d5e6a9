"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

from fastapi import FastAPI

from academy.api.v1.router import api_router
from academy.core.config import settings
from academy.core.logger import setup_logger

setup_logger(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Academy session scheduling and player performance aggregation.",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json")

# Include API router
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "message": "Academy Sessions API",
        "version": settings.VERSION,
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "academy-sessions-api",
        "version": settings.VERSION
    }


@app.get("/info")
async def info():
    return {
        "project name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "authors": settings.AUTHORS,
        "project url": settings.PROJECT_URL
    }
