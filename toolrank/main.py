"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolrank import __version__
from toolrank.config import get_settings
from toolrank.database import engine

# Import routers
from toolrank.routers import (
    health,
    upvotes,
    favorites,
    tools,
    users,
    ops,
)

# Import middleware
from toolrank.middleware import logging_middleware, register_exception_handlers
from toolrank.utils.logger import configure_logging, get_logger

settings = get_settings()

# Configure logging early
configure_logging(log_level=settings.log_level, debug=settings.debug)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)
    if not settings.auth_issuer:
        log.warning("auth issuer not configured, authenticated endpoints will reject all tokens")

    yield

    log.info("shutting down application")
    await engine.dispose()
    log.info("database connections closed")


app = FastAPI(
    title="Toolrank API",
    description="Upvote ranking and daily rate limiting for a tool directory",
    version=__version__,
    lifespan=lifespan,
)

# Register exception handlers first
register_exception_handlers(app)

# CORS middleware
_cors_origins = settings.get_cors_origins_list()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["*"],
    allow_credentials=bool(_cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware
app.middleware("http")(logging_middleware)

# Register routers
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(tools.router, prefix="/api/v1")
app.include_router(upvotes.router, prefix="/api/v1")
app.include_router(favorites.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(ops.router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Toolrank API",
        "version": __version__,
        "features": [
            "Daily-capped tool upvotes (3 distinct tools per UTC day)",
            "Monthly upvote counts and leaderboard",
            "Favorites",
        ],
        "endpoints": {
            "health": "/api/v1/health",
            "tools": "/api/v1/tools",
            "users": "/api/v1/users",
            "ops": "/api/v1/ops",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "toolrank.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
