"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from travel_buddy.core.database import init_db
from travel_buddy.core.logging_config import get_logger, setup_logging
from travel_buddy.core.monitoring import initialize_logfire

from .api.v1 import (
    auth,
    conversations,
    groups,
    health,
    journals,
    marketplace,
    matches,
    realtime,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware
from .services.connections import get_connection_manager
from .services.deps import close_score_cache

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the schema on startup; on shutdown closes every open WebSocket and
    drops the cached compatibility scores.
    """
    # Startup
    logger.info("Starting up Travel Buddy Server...")
    await init_db()
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Travel Buddy Server...")
    await get_connection_manager().close_all()
    await close_score_cache()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Travel Buddy API

    Backend services for the Travel Buddy companion matching platform: accounts,
    swipe-based matching, conversations, travel groups, journals and a gear
    marketplace, plus a WebSocket channel for real-time events.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users", tags=["users"])
# Registered before the matches router so /matches/{match_id} does not shadow it
app.include_router(
    conversations.router, prefix=f"{constant.API_V1_STR}/matches/conversations", tags=["conversations"]
)
app.include_router(matches.router, prefix=f"{constant.API_V1_STR}/matches", tags=["matches"])
app.include_router(groups.router, prefix=f"{constant.API_V1_STR}/groups", tags=["groups"])
app.include_router(journals.router, prefix=f"{constant.API_V1_STR}/journals", tags=["journals"])
app.include_router(marketplace.router, prefix=f"{constant.API_V1_STR}/marketplace", tags=["marketplace"])
app.include_router(realtime.router, prefix=constant.API_V1_STR, tags=["realtime"])

upload_dir = Path(settings.upload.directory)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(constant.UPLOADS_URL_PATH, StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

initialize_logfire(app)


def run() -> None:
    """Serve the application with uvicorn, using the configured keepalive pings."""
    import uvicorn

    uvicorn.run(
        "travel_buddy.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        ws_ping_interval=settings.websocket.ping_interval_seconds,
        ws_ping_timeout=settings.websocket.ping_timeout_seconds,
    )
