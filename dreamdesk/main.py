"""
FastAPI application entry point.

Sets up the app, lifespan (DB connect/disconnect, blob directory), CORS,
logging, error rendering, and includes API routers.

Errors are rendered as {"error": "..."} bodies: HTTPException details,
request validation failures (400) and store failures (500) all go through
the handlers registered in create_application().
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dreamdesk.api import ai, blobs, content, users, videos, webhooks
from dreamdesk.config import get_settings
from dreamdesk.database import close_mongo_connection, connect_to_mongo
from dreamdesk.services.blob_store import BlobStore
from dreamdesk.services.document_store import StoreOperationError
from dreamdesk.services.errors import NotConfiguredError, UpstreamError

# Configure logging - single place for log format and level
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

_CREDENTIALS = {
    "clerk_secret_key": "CLERK_SECRET_KEY",
    "clerk_webhook_secret": "CLERK_WEBHOOK_SECRET",
    "fal_api_key": "FAL_API_KEY",
    "openai_api_key": "OPENAI_API_KEY",
    "groq_api_key": "GROQ_API_KEY",
    "youtube_api_key": "YOUTUBE_API_KEY",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: runs on startup and shutdown.
    Connects to MongoDB and prepares the blob directory at start,
    disconnects at end.
    """
    # Startup
    await connect_to_mongo(app)
    settings = get_settings()
    # Endpoints depending on a missing key answer 500 "not configured"
    for attr, env_name in _CREDENTIALS.items():
        if not getattr(settings, attr):
            logger.warning("%s is not set; endpoints using it will answer 500.", env_name)
    if not (settings.clerk_jwt_key or settings.clerk_jwks_url):
        logger.warning("Neither CLERK_JWT_KEY nor CLERK_JWKS_URL is set; every request will be unauthenticated.")

    blob_path = Path(settings.blob_dir)
    blob_path.mkdir(parents=True, exist_ok=True)
    app.state.blob_store = BlobStore(blob_path, settings.public_base_url)
    logger.info("Blob directory ready: %s", blob_path.resolve())
    yield
    # Shutdown
    await close_mongo_connection(app)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": errors},
    )


async def store_exception_handler(request: Request, exc: StoreOperationError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Store operation failed"},
    )


async def not_configured_handler(request: Request, exc: NotConfiguredError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": exc.message})


async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Upstream failure on %s %s: %s (%s)", request.method, request.url.path, exc.message, exc.body)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": exc.message})


def create_application() -> FastAPI:
    """Factory for the FastAPI app. Keeps main.py clean and testable."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Notes, business ideas, a resource library, AI image tools and video browsing.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS - allow the web frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production to your frontend origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreOperationError, store_exception_handler)
    app.add_exception_handler(NotConfiguredError, not_configured_handler)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)

    # Auth is a dependency (require_authenticated) used inside the routers
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(content.notes_router, prefix="/api/notes", tags=["notes"])
    app.include_router(content.ideas_router, prefix="/api/ideas", tags=["ideas"])
    app.include_router(content.library_router, prefix="/api/library", tags=["library"])
    app.include_router(ai.router, prefix="/api", tags=["ai"])
    app.include_router(videos.router, prefix="/api/videos", tags=["videos"])
    app.include_router(webhooks.router, prefix="/api/webhooks", tags=["webhooks"])
    app.include_router(blobs.router, prefix="/api/blobs", tags=["blobs"])
    app.include_router(blobs.public_router, tags=["blobs"])

    return app


app = create_application()
