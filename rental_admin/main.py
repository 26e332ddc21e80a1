# rental_admin/main.py - FastAPI application, logging and error mapping
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import traceback
import time

from rental_admin.core.config import settings
from rental_admin.core.db import db_manager, get_engine, health_check as db_health_check
from rental_admin.core.exceptions import RentalAdminError
from rental_admin.models import Base
from rental_admin.api.routers import pricing, system_config


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.log_format_string
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.API_TITLE}...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database URL: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'local'}")

    engine = get_engine()

    # Migrations own the schema outside development
    if settings.is_development:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)

    yield

    logger.info(f"Shutting down {settings.API_TITLE}...")
    db_manager.close()


app = FastAPI(
    title=settings.API_TITLE,
    description="System and pricing configuration for vehicle rentals",
    version=settings.API_VERSION,
    docs_url="/docs" if settings.is_development and settings.DEV_SHOW_DOCS else None,
    redoc_url="/redoc" if settings.is_development and settings.DEV_SHOW_DOCS else None,
    lifespan=lifespan
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and processing time"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    return response


app.add_middleware(CORSMiddleware, **settings.get_cors_config())


@app.exception_handler(RentalAdminError)
async def rental_admin_error_handler(request: Request, exc: RentalAdminError):
    """Map service errors to their HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    logger.error(traceback.format_exc())

    if settings.is_development:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "traceback": traceback.format_exc()
            }
        )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


@app.get("/health")
def health_check():
    database = db_health_check()
    return {
        "status": "healthy" if database.get("status") == "healthy" else "degraded",
        "environment": settings.ENV,
        "version": settings.API_VERSION,
        "database": database,
    }


app.include_router(system_config.router, prefix="/api/config", tags=["System Config"])
app.include_router(pricing.router, prefix="/api/config", tags=["Pricing"])


@app.get("/")
def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs_url": "/docs" if app.docs_url else "Documentation disabled",
    }
