"""
Community Service Request Management System - Main Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from prometheus_client import make_asgi_app
from slowapi.errors import RateLimitExceeded

import csrms.models  # noqa: F401
from csrms.api.v1.router import api_router
from csrms.bootstrap import seed_staff_recipient
from csrms.core.config import settings
from csrms.core.database import Database
from csrms.core.logging import RequestContextMiddleware, setup_logging
from csrms.core.mail import SmtpMailer
from csrms.core.metrics import MetricsMiddleware
from csrms.core.rate_limiter import limiter, rate_limit_handler
from csrms.utils.uploads import ImageStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create shared resources on startup and release them on shutdown."""
    # Startup
    setup_logging()
    database = Database.from_settings(settings)
    if await database.connect():
        await database.create_all()
        await seed_staff_recipient(database, settings)

    app.state.database = database
    app.state.mailer = SmtpMailer.from_settings(settings)
    app.state.image_store = ImageStore(settings.UPLOAD_DIR)
    if not app.state.mailer.configured:
        logger.warning("SMTP not configured; email notifications will fail")

    try:
        yield
    finally:
        # Shutdown: the server has stopped accepting and drained requests.
        await database.dispose()


app = FastAPI(
    title="Community Service Request Management System",
    description="Citizen service request intake, tracking, audit and notifications",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

# Mount Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "csrms"}


@app.get("/")
async def root():
    """Root endpoint with system information."""
    return {
        "service": "Community Service Request Management System",
        "version": "1.0.0",
        "docs": "/api/docs",
        "health": "/health",
        "metrics": "/metrics",
    }
