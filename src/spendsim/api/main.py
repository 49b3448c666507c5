"""
Main FastAPI application for the spend simulator.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog
import traceback
import time
from contextlib import asynccontextmanager

from spendsim.config.settings import settings
from spendsim.api.routes import health, simulation, insights
from spendsim.api.routes.health import VERSION
from spendsim.api.schemas import ErrorResponseSchema
from spendsim.utils.exceptions import ChannelNotFoundError, ConfigurationError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(
        "Starting spend simulator API",
        environment=settings.env.value,
        channels_file=settings.simulation.channels_file,
        insights_enabled=bool(settings.insights.api_key)
    )

    yield

    logger.info("Shutting down spend simulator API")


app = FastAPI(
    title="Marketing Spend Simulator API",
    description="Evaluate marketing budget allocations against diminishing-returns response curves",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=settings.api.cors_methods,
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time

    logger.info(
        "HTTP request processed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        process_time=process_time
    )

    return response


@app.exception_handler(ChannelNotFoundError)
async def channel_not_found_handler(request: Request, exc: ChannelNotFoundError):
    """Unknown channel id in a request."""
    return JSONResponse(
        status_code=404,
        content=ErrorResponseSchema(error="Channel not found", detail=str(exc)).model_dump()
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Invalid channel configuration."""
    logger.error("Invalid configuration", error=str(exc), errors=exc.errors, url=str(request.url))
    return JSONResponse(
        status_code=500,
        content={
            "error": "Configuration error",
            "detail": str(exc),
            "errors": exc.errors
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        method=request.method,
        url=str(request.url)
    )

    content = {"error": "Internal server error", "detail": "An unexpected error occurred"}
    if settings.is_development():
        content["detail"] = str(exc)
        content["traceback"] = "".join(traceback.format_exception(exc))

    return JSONResponse(status_code=500, content=content)


app.include_router(health.router, prefix="/api/health", tags=["health"])
app.include_router(simulation.router, prefix="/api/simulation", tags=["simulation"])
app.include_router(insights.router, prefix="/api/insights", tags=["insights"])


@app.get("/")
async def root():
    """Service information."""
    return {
        "message": "Marketing Spend Simulator API",
        "version": VERSION,
        "environment": settings.env.value
    }


@app.get("/api/info")
async def api_info():
    """API information endpoint."""
    return {
        "message": "Marketing Spend Simulator API",
        "version": VERSION,
        "environment": settings.env.value,
        "channels_file": settings.simulation.channels_file
    }
