"""
Ticket Sales API - Main Application Entry Point

Answers "is this ticket on sale for this occurrence, and how many are left?"
and takes reservations without overselling:
- Sale windows fixed in time or relative to each occurrence's start
- Capacity checks serialized per (ticket, occurrence) with a reservation lock
- Structured logging with request correlation
- Prometheus metrics for availability decisions and reservation outcomes
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticket_sales.core.config import get_settings
from ticket_sales.core.logging import setup_logging, get_logger
from ticket_sales.core.metrics import metrics_endpoint
from ticket_sales.api.errors import register_exception_handlers
from ticket_sales.api.router import api_router
from ticket_sales.api.middleware import RequestLoggingMiddleware
from ticket_sales.db.session import engine
from ticket_sales.infrastructure.redis_client import close_redis

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        reservation_lock=settings.RESERVATION_LOCK,
    )

    yield

    if settings.RESERVATION_LOCK == "redis":
        await close_redis()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Ticket sale windows, availability and overbooking-safe reservations",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "reservation_lock": settings.RESERVATION_LOCK,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
def metrics():
    return metrics_endpoint()
