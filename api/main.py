"""
Subtitle Burner Service - FastAPI Application

Main application entry point with core configuration and routing.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import time

from api.utils.errors import register_exception_handlers
from api.utils.logging import setup_logging
from api.routers import render, styles
from burner import __version__
from burner.config import get_settings
from burner.janitor import Janitor
from burner.orchestrator import get_orchestrator

settings = get_settings()

# Setup logging
setup_logging(log_level=settings.log_level, use_json=settings.log_json)

# Track service start time for uptime calculation
START_TIME = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the janitor with the service; stop it and in-flight jobs on exit."""
    settings.ensure_dirs()
    orchestrator = get_orchestrator()
    janitor = Janitor(
        orchestrator.registry,
        interval=settings.janitor_interval,
        retention=settings.job_retention,
    )
    janitor.start()
    app.state.janitor = janitor

    yield

    await janitor.stop()
    await orchestrator.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Subtitle Burner Service",
    version=__version__,
    description=(
        "Burns word-timed transcripts into videos as styled subtitles. "
        "Jobs run asynchronously; poll their status and download the result."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Register routers
app.include_router(render.router)
app.include_router(styles.router, tags=["Styles"])


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint providing service information.
    """
    return {
        "service": "Subtitle Burner Service",
        "version": __version__,
        "status": "operational",
        "documentation": "/docs",
        "api_docs": "/redoc",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Basic health check endpoint.

    Returns service health status and the number of tracked jobs.
    """
    uptime_seconds = time.time() - START_TIME

    return {
        "status": "healthy",
        "uptime_seconds": uptime_seconds,
        "version": __version__,
        "jobs": len(get_orchestrator().registry),
    }
