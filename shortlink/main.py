"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import os
import traceback
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink.api import api_router
from shortlink.core.config import settings
from shortlink.core.logging import setup_logging
from shortlink.db.base import create_tables, dispose_engine
from shortlink.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from shortlink.services.exceptions import ServiceError

# Setup logging
logger = setup_logging()


def render_error(
    exc: Exception, status_code: int, message: str = None, headers: dict = None
) -> JSONResponse:
    """Build the ``{message, stack}`` error body.

    The traceback is only echoed outside production.
    """
    if settings.IS_PRODUCTION:
        stack = settings.STACK_PLACEHOLDER
    else:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=status_code,
        content={"message": message if message is not None else str(exc), "stack": stack},
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and release it on shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    if settings.DB_CREATE_TABLES:
        await create_tables()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await dispose_engine()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware)

if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(RequestLoggingMiddleware)

# Front-end assets
if os.path.isdir(settings.STATIC_DIR):
    app.mount(settings.STATIC_URL, StaticFiles(directory=settings.STATIC_DIR), name="static")
else:
    logger.info(f"Static directory '{settings.STATIC_DIR}' not found, assets disabled")


@app.get("/", include_in_schema=False)
async def landing_page():
    """Serve the front-end entry page, or a service banner without one."""
    index = Path(settings.STATIC_DIR) / "index.html"
    if index.is_file():
        return FileResponse(index)
    return {"name": settings.APP_NAME, "version": settings.APP_VERSION}


# Include API router
app.include_router(api_router)


# Add exception handlers
@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    """Single point that maps service errors to status codes."""
    if exc.kind.status_code >= 500:
        logger.opt(exception=exc).error(
            f"{exc.kind.code} error in {request.method} {request.url.path}"
        )
    else:
        logger.info(f"{exc.kind.code} error in {request.method} {request.url.path}: {exc}")
    return render_error(exc, exc.kind.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Body parsing failures and router 404/405 answers use the same shape."""
    logger.info(f"HTTP {exc.status_code} in {request.method} {request.url.path}: {exc.detail}")
    return render_error(exc, exc.status_code, message=str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies with the same error shape."""
    logger.info(f"Request validation error: {exc.errors()}")
    messages = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return render_error(exc, 422, message=messages or "Invalid request")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    logger.opt(exception=exc).error(
        "Unhandled exception in {method} {path}",
        path=request.url.path,
        method=request.method,
        client_host=request.client.host if request.client else None
    )
    return render_error(exc, 500)
