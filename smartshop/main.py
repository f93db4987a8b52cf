"""
FastAPI application for SmartShop POS.

To run: uvicorn smartshop.main:app --reload
"""
from contextlib import asynccontextmanager
from typing import Callable, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartshop.api.v1 import api_router
from smartshop.context import AppContext, build_context
from smartshop.core.config import Settings, get_settings
from smartshop.error_handlers import register_exception_handlers
from smartshop.logging_config import setup_logging
from smartshop.middleware import RequestLoggingMiddleware


def create_app(
    settings: Optional[Settings] = None,
    context_factory: Optional[Callable[[Settings], AppContext]] = None
) -> FastAPI:
    """
    Build the application.

    `context_factory` defaults to `build_context`, which requires the remote
    store and Gemini credentials and fails at startup without them.
    """
    settings = settings or get_settings()
    context_factory = context_factory or build_context

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup and shutdown events.
        """
        logger = setup_logging(
            settings.log_level,
            settings.log_file,
            settings.log_max_bytes,
            settings.log_backup_count
        )
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")

        ctx = context_factory(settings)
        await ctx.start()
        app.state.ctx = ctx
        logger.info("Application startup complete")

        yield

        logger.info("Shutting down application...")
        await ctx.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="SmartShop POS - Inventory, Sales, Reports & Cloud Sync",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/docs" if settings.debug else "disabled",
            "api_v1": "/api/v1"
        }

    @app.get("/health")
    async def health_check():
        """Simple health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "smartshop.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug
    )
