"""
Main FastAPI application for Harmonograph Studio.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from harmonograph.api.routes import health, visual
from harmonograph.api.websocket import router as websocket_router
from harmonograph.core.config import settings
from harmonograph.core.exceptions import HarmonographError
from harmonograph.core.logging import get_logger
from harmonograph.visual.controls import CONTROLS, RANDOM_RANGES

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    # Startup
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        env=settings.env,
        canvas_width=settings.canvas_width,
        canvas_height=settings.canvas_height
    )

    yield

    # Shutdown
    logger.info("application_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="Harmonograph Studio API",
    description="Damped Lissajous curve generation, live controls and SVG export",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware (configure based on frontend needs)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# Exception handlers
@app.exception_handler(HarmonographError)
async def harmonograph_error_handler(request, exc: HarmonographError) -> JSONResponse:
    """Handle custom Harmonograph errors."""
    logger.error(
        "harmonograph_error",
        error_code=exc.code,
        message=exc.message,
        path=request.url.path
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message
            }
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "unexpected_error",
        error_type=type(exc).__name__,
        path=request.url.path
    )

    if settings.is_development:
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc),
                    "type": type(exc).__name__
                }
            }
        )
    else:
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred"
                }
            }
        )


# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(visual.router, prefix="/api/v1/harmonograph", tags=["harmonograph"])
app.include_router(websocket_router, tags=["websocket"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "environment": settings.env,
        "docs": "/docs",
        "redoc": "/redoc",
        "api": {
            "health": "/api/v1/health",
            "harmonograph": "/api/v1/harmonograph",
            "websocket": "/ws/canvas/{session_id}"
        }
    }


@app.get("/api/v1/system/capabilities")
async def system_capabilities():
    """
    Get what the curve engine supports.
    """
    return {
        "oscillators": 4,
        "controls": len(CONTROLS),
        "randomizable": sorted(RANDOM_RANGES.keys()),
        "noise": "gradient_3d",
        "smoothing": "catmull_rom_bezier",
        "export_formats": ["svg"],
        "max_points": settings.max_points
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "harmonograph.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower()
    )
