"""
Seatwise - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from seatwise.config import settings
from seatwise.exceptions import SeatwiseError
from seatwise.state import get_state
from seatwise.api import bookings, discovery, settings as settings_api, waitlist
from seatwise.jobs.scheduler import create_scheduler

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "console"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Seatwise API", version="1.0.0")
    state = get_state()

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = create_scheduler(state)
        scheduler.start()
        logger.info("Scheduler started")
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    logger.info("Shutting down Seatwise API")


# Create FastAPI application
app = FastAPI(
    title="Seatwise",
    description="Table discovery and booking engine for restaurants",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SeatwiseError)
async def seatwise_error_handler(request: Request, exc: SeatwiseError):
    """Map domain errors to HTTP responses"""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


# Include API routers
app.include_router(discovery.router, prefix="/woki", tags=["Discovery"])
app.include_router(bookings.router, prefix="/woki/bookings", tags=["Bookings"])
app.include_router(waitlist.router, prefix="/woki/waitlist", tags=["Waitlist"])
app.include_router(settings_api.router, prefix="/woki/settings", tags=["Settings"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "seatwise.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
