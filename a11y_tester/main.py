# Windows async compatibility fix - MUST be at the very top
import sys
import asyncio
if sys.platform == 'win32':
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

"""
FastAPI application entry point for Accessibility Tester.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .database import init_db
from .errors import AccessibilityTestError, ErrorCode
from .routers import accessibility

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: Initialize database and reports directory
    init_db()
    settings.reports_dir.mkdir(parents=True, exist_ok=True)
    print(f"🚀 {settings.app_name} started!")
    print(f"📁 Reports directory: {settings.reports_dir}")
    print(f"🤖 AI suggestions: {'on' if settings.ai_suggestions_enabled and settings.gemini_api_key else 'off'}")
    yield
    # Shutdown
    print(f"👋 {settings.app_name} shutting down...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Tests web pages for WCAG accessibility issues and exports scored PDF reports",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(accessibility.router, tags=["accessibility"])


@app.exception_handler(AccessibilityTestError)
async def accessibility_error_handler(request: Request, exc: AccessibilityTestError):
    """Structured JSON body for classified failures."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed submissions are answered like any other unusable URL."""
    errors = exc.errors()
    if any(tuple(item.get("loc", ()))[:1] == ("body",) for item in errors):
        error = AccessibilityTestError(
            "Please enter a valid URL starting with http:// or https://",
            ErrorCode.INVALID_URL
        )
    else:
        error = AccessibilityTestError(
            "Invalid request parameters",
            ErrorCode.INVALID_REQUEST,
            "; ".join(
                f"{'.'.join(str(part) for part in item.get('loc', ()))}: {item.get('msg')}"
                for item in errors
            )
        )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = AccessibilityTestError(
        "An unexpected error occurred.",
        ErrorCode.UNKNOWN_ERROR,
        str(exc)
    )
    return JSONResponse(status_code=500, content=error.to_dict())


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": __version__
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs": "/docs",
        "health": "/health",
        "test": "POST /test",
        "export": "GET /export-pdf/{reportId}"
    }
