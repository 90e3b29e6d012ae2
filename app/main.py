"""FastAPI application entry point"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.router import api_router
from app.config import get_settings
from app.core.exceptions import AppException
from app.core.logging import setup_logging
from app.database import engine, get_db, init_models, ping_database
from app.services.cache_service import CacheService

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, structured=settings.structured_logs)
    await init_models()
    logger.info("%s started", settings.app_name)
    yield
    await CacheService.close_redis_client()
    await engine.dispose()
    logger.info("%s stopped", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="Backend API for tracking money owed between users",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add CORS middleware
if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.allowed_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Exception handlers
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Handle custom application exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "type": exc.error_type,
                "path": str(request.url.path),
            }
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {"message": "Internal server error", "type": "InternalServerError"}
        },
    )


# Include API v1 router
app.include_router(api_router, prefix=settings.api_prefix)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with pointers to the docs"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs_url": "/docs",
        "version": "1.0.0",
    }


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Reports "degraded" when Redis is unreachable, since the API keeps
    working without its cache. A database failure makes the service
    unhealthy (503).
    """
    try:
        database_ok = await ping_database(db)
    except Exception:
        logger.exception("Database health check failed")
        database_ok = False

    cache_ok = await CacheService.health_check()

    if not database_ok:
        health_status = "unhealthy"
    elif not cache_ok:
        health_status = "degraded"
    else:
        health_status = "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": health_status,
            "checks": {
                "database": "up" if database_ok else "down",
                "cache": "up" if cache_ok else "down",
            },
        },
    )
