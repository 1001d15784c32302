"""Main FastAPI application for the hotel website CMS."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hotel_cms import __version__
from hotel_cms.api.routes import (
    auth,
    contact_messages,
    health,
    public,
    uploads,
    users,
    website_content,
    websites,
)
from hotel_cms.core.database import get_database
from hotel_cms.core.exceptions import AppError, ConflictError
from hotel_cms.core.settings import get_settings
from hotel_cms.middleware.logging import LoggingMiddleware, configure_logging, get_request_logger
from hotel_cms.middleware.rate_limiting import RateLimitMiddleware
from hotel_cms.schemas.base import error_body
from hotel_cms.services.file_storage import init_file_storage

# Initialize logging
configure_logging()

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    storage = init_file_storage(settings)
    storage.root.mkdir(parents=True, exist_ok=True)
    database = get_database()
    await database.connect()
    if settings.auto_create_schema:
        await database.create_all()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Hotel CMS",
    description="Multi-tenant hotel website content management API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Last added runs first: requests are logged before they are rate limited
app.add_middleware(RateLimitMiddleware)
app.add_middleware(LoggingMiddleware)


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Expected errors: the message is returned verbatim."""
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError):
    logger.warning(f"Concurrent modification on {request.url.path}: {exc}")
    return JSONResponse(status_code=ConflictError.status_code, content=error_body(ConflictError.default_message))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    message = "; ".join(f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(message or "Validation failed", errors=errors),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything unexpected: log it, hide it outside development."""
    get_request_logger(request).error(
        "Unhandled exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        exc_info=exc,
    )
    if settings.is_development:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(f"{type(exc).__name__}: {exc}"),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Something went wrong"),
    )


# Routes
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(public.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(websites.router, prefix=settings.api_prefix)
app.include_router(website_content.router, prefix=settings.api_prefix)
app.include_router(contact_messages.router, prefix=settings.api_prefix)
app.include_router(uploads.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)

# Uploaded images are referenced as /public/<website>/<file>
app.mount("/public", StaticFiles(directory=settings.upload_public_dir, check_dir=False), name="public")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "hotel-cms",
        "version": __version__,
        "status": "running",
        "api": {
            "docs": "/docs" if not settings.is_production else None,
            "openapi": "/openapi.json" if not settings.is_production else None,
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "hotel_cms.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
