"""Main application entry point for the forum moderation API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forum_moderation_api.api.automod import router as automod_router
from forum_moderation_api.api.comments import router as comments_router
from forum_moderation_api.api.mentions import router as mentions_router
from forum_moderation_api.api.modlog import router as modlog_router
from forum_moderation_api.api.notifications import router as notifications_router
from forum_moderation_api.api.posts import router as posts_router
from forum_moderation_api.api.trending import router as trending_router
from forum_moderation_api.config.settings import get_settings
from forum_moderation_api.database.connection import close_database
from forum_moderation_api.database.connection import db
from forum_moderation_api.database.connection import init_database
from forum_moderation_api.errors import register_exception_handlers
from forum_moderation_api.workers.redis_connection import close_redis_connections


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    await init_database()
    yield
    await close_redis_connections()
    await close_database()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Community moderation, mentions and trending for forum topics",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(automod_router, prefix="/api/v1")
    app.include_router(comments_router, prefix="/api/v1")
    app.include_router(mentions_router, prefix="/api/v1")
    app.include_router(modlog_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(trending_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        db_healthy = await db.health_check()
        pool_stats = await db.get_pool_stats()

        return {
            "status": "ok" if db_healthy else "error",
            "database": {
                "healthy": db_healthy,
                "pool": pool_stats,
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "forum_moderation_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )
