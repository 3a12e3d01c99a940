"""ProMan Property Management System - Main Application Entry Point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .core.exceptions import ProManException
from .core.logging import (
    LoggingMiddleware,
    RequestIdMiddleware,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .database import AsyncSessionLocal, init_db

# Import routers
from .modules.address_management import router as addresses_router
from .modules.address_management import seed_demo_addresses
from .modules.expense_management import router as expenses_router
from .modules.resident_management import router as residents_router

logger = get_logger(__name__)


def error_response(status_code: int, msg: str, data=None) -> JSONResponse:
    """Failure envelope; ``code`` mirrors the HTTP status."""
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "msg": msg, "data": data},
    )


async def seed_demo_data() -> None:
    async with AsyncSessionLocal() as db:
        created = await seed_demo_addresses(db)
        await db.commit()
    logger.info(f"Seeded {created} demo addresses")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging(
        log_to_file=settings.log_to_file,
        log_level=settings.log_level,
        log_file_path=settings.log_file_path,
        log_format=settings.log_format,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger.info("Starting ProMan application...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.app_debug}")
    if settings.db_auto_create:
        await init_db()
    if settings.seed_demo_data:
        await seed_demo_data()
    yield
    # Shutdown
    logger.info("Shutting down ProMan application...")
    shutdown_logging()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description="Property Management System: addresses, residents and expenses",
    version=settings.api_version,
    docs_url=f"{settings.api_prefix}/docs" if settings.app_debug else None,
    redoc_url=f"{settings.api_prefix}/redoc" if settings.app_debug else None,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging, or just transaction ID propagation
if settings.log_requests:
    app.add_middleware(LoggingMiddleware)
else:
    app.add_middleware(RequestIdMiddleware)


# Global exception handlers
@app.exception_handler(ProManException)
async def proman_exception_handler(request: Request, exc: ProManException):
    """Handle ProMan-specific exceptions."""
    status_code = getattr(exc, "status_code", 400)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    else:
        logger.warning(
            f"{type(exc).__name__}: {exc.message}",
            extra={"path": request.url.path},
        )
    return error_response(status_code, exc.message, exc.details or None)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Handle malformed request bodies, paths and query strings."""
    return error_response(
        400,
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle routing errors such as unknown paths and wrong methods."""
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(
        500, str(exc) if settings.app_debug else "Internal server error"
    )


# Health check endpoint
@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "code": 200,
        "msg": "Success",
        "data": {
            "status": "healthy",
            "version": settings.api_version,
            "env": settings.app_env,
        },
    }


# Register routers with the API prefix
app.include_router(addresses_router, prefix=settings.api_prefix)
app.include_router(residents_router, prefix=settings.api_prefix)
app.include_router(expenses_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "proman_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
