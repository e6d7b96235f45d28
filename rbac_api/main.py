"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rbac_api.api.errors import register_exception_handlers
from rbac_api.api.middleware import LoggingMiddleware, RequestIdMiddleware
from rbac_api.api.routes import router as api_router
from rbac_api.core.auth.passwords import get_password_hasher
from rbac_api.core.config import settings
from rbac_api.core.errors import AppError, ConflictError
from rbac_api.core.hooks import hooks
from rbac_api.core.logging import configure_logging
from rbac_api.models.database import close_db, get_session_factory, init_db
from rbac_api.repositories import IdentityStore
from rbac_api.services import SeedService

logger = structlog.get_logger()


async def auto_seed_admin() -> None:
    """Seed the admin account on startup; an existing admin is not an error."""
    service = SeedService(IdentityStore(get_session_factory()), get_password_hasher())
    try:
        await service.seed_admin()
    except ConflictError:
        logger.info("seed.admin.skipped", reason="admin already exists")
    except AppError as e:
        logger.error("seed.admin.failed", error=e.message, error_id=e.error_id)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    configure_logging(settings)

    if settings.database.create_tables:
        await init_db()
    if settings.seed.auto_seed_admin:
        await auto_seed_admin()

    await hooks.trigger("app.startup")
    logger.info("app.started", environment=settings.environment, version=settings.app_version)

    yield

    await hooks.trigger("app.shutdown")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rbac_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
