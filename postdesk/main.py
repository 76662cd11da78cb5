"""
PostDesk API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import engine, Base
from .logging_config import api_logger
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .limiter import limiter
from .responses import (
    http_exception_handler,
    scheduling_exception_handler,
    validation_exception_handler,
)
from .routes import (
    schedules_router,
    reminders_router,
    calendar_router,
    event_posts_router,
    hiring_router,
)
from .scheduling import SchedulingError, build_scheduling

VERSION = "1.0.0"

settings = get_settings()

# Create tables (in production, use Alembic migrations instead)
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the scheduling stores and the reminder sweeper for the app's lifetime"""
    core = build_scheduling(settings)
    app.state.scheduling = core

    if settings.reminder_sweep_enabled:
        core.sweeper.start()

    yield

    await core.sweeper.stop()
    api_logger.info(
        "Shutting down; in-memory schedules are discarded",
        schedules=len(core.state.schedules),
        reminders=len(core.state.reminders),
    )


app = FastAPI(
    title=settings.app_name,
    description="Event post scheduling, approval and hiring API",
    version=VERSION,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Error envelope
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SchedulingError, scheduling_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)

# Request logging middleware (only in debug mode)
if settings.debug:
    app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
        "X-Request-ID",
    ],
    max_age=3600,
)

# Routes
app.include_router(schedules_router)
app.include_router(reminders_router)
app.include_router(calendar_router)
app.include_router(event_posts_router)
app.include_router(hiring_router)


@app.get("/api/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    core = app.state.scheduling
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": VERSION,
        "reminder_sweeper_running": core.sweeper.running,
        "schedules": len(core.state.schedules),
        "reminders": len(core.state.reminders),
    }


@app.get("/")
def root():
    return {
        "message": settings.app_name,
        "docs": "/api/docs" if settings.debug else "Disabled in production",
    }
