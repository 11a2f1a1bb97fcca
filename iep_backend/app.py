# FILE: iep_backend/app.py
"""
FastAPI application entry point for the IEP Hero memory backend
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from iep_backend import __version__
from iep_backend.config import Settings, get_settings
from iep_backend.middleware.body_limit import BodySizeLimitMiddleware
from iep_backend.middleware.rate_limit import RateLimitMiddleware
from iep_backend.routes import health, memory, test_memory
from iep_backend.services.demo_seed import seed_demo_data
from iep_backend.services.memory_pipeline import get_pipeline

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its middleware and routers"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown"""
        configure_logging(settings.log_level)
        logger.info(f"Starting IEP Hero memory backend v{__version__}")

        if settings.seed_demo_data:
            result = seed_demo_data(get_pipeline().store, settings.demo_user_id)
            logger.info(f"Demo seed: {result}")

        yield

        logger.info("Shutting down IEP Hero memory backend")

    app = FastAPI(
        title="IEP Hero Memory API",
        description="IEP memory queries with validated answers and advocate sharing",
        version=__version__,
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting
    if settings.rate_limit_enabled:
        app.add_middleware(RateLimitMiddleware, rpm=settings.rate_limit_rpm)

    # Body size limit
    app.add_middleware(BodySizeLimitMiddleware, max_size=settings.body_size_limit_mb * 1024 * 1024)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    # Include routers
    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(test_memory.router, prefix="/api", tags=["test-memory"])
    app.include_router(memory.router, prefix="/api", tags=["memory"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "service": "IEP Hero Memory API",
            "version": __version__,
            "status": "active"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "iep_backend.app:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.environment == "development"
    )
