"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy import text

from quickvote.api.router import api_router
from quickvote.api.deps import get_db, get_notifier, store_context
from quickvote.api.errors import register_exception_handlers
from quickvote.core.config import settings
from quickvote.core.rate_limit import limiter
from quickvote.core.logging_config import setup_logging, get_logger
from quickvote.db import init_db
from quickvote.middleware import LoggingMiddleware
from quickvote.realtime.notifier import Notifier
from quickvote.services.cleanup import ExpirySweeper
from quickvote.services.sessions import drain_publishes

# Initialize structured logging
setup_logging(level=settings.LOG_LEVEL, json_logs=settings.ENVIRONMENT == "production")
logger = get_logger(__name__)

# Validate production configuration after logging is configured
if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, then sweep expired sessions now and on a fixed interval."""
    init_db()

    sweeper = ExpirySweeper(store_context, interval_seconds=settings.CLEANUP_INTERVAL_HOURS * 3600)
    sweeper.start()
    app.state.sweeper = sweeper

    yield

    await sweeper.stop()
    await drain_publishes()


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter

# Add rate limit exceeded exception handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Domain errors, validation errors and unexpected failures as {"error": ...}
register_exception_handlers(app)

# Add logging middleware (must be added before other middleware for proper request tracking)
app.add_middleware(LoggingMiddleware)

# Add API versioning middleware
@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

# CORS middleware - only the frontend origin may call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Health check endpoint.

    Returns:
        - status: "healthy"
        - environment: Current environment setting
        - database: Database connection status
        - realtime: Number of connected realtime subscribers

    Returns 503 if database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": {"status": "connected"},
        "realtime": {"subscribers": notifier.subscriber_count()},
    }

    try:
        # Test database connection with a simple query
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail="Database unavailable")

    return health_status
