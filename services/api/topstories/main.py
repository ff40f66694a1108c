"""FastAPI application entry point.

HN Top Stories API - a few current Hacker News best stories with
semi-fresh scores and comment counts.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from topstories.errors import HTTPError
from topstories.routes import api_router
from topstories.services.hn_client import close_hn_client
from topstories.settings import get_settings
from topstories.stores.redis import init_redis, close_redis

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Initialize Redis (skip in tests if no Redis available)
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    yield

    # Shutdown
    await close_hn_client()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Hacker News top stories with semi-fresh stats",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPError)
    async def http_error_handler(request: Request, exc: HTTPError) -> JSONResponse:
        """Render classified errors as { "error": message }."""
        logger.info(f"request failed path={request.url.path} status={exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler; never leaks internals."""
        logger.exception(f"unhandled error path={request.url.path}")
        return JSONResponse(status_code=500, content={"error": "internal server error"})

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "topstories.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
