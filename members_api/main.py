"""
FastAPI Application Entry Point

This module builds the members API: member CRUD over MongoDB, photo
uploads to Cloudinary and a keep-alive self ping that runs on the
same event loop as the request handlers.

Run with: uvicorn members_api.main:app --host 0.0.0.0 --port 3000
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings
from .core.utils import get_timestamp
from .api.routes import router
from .media.uploader import MediaUploader
from .storage.members import MemberStore
from .workers.pinger import KeepAlivePinger

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# ============================================================
# Application Lifespan Handler
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: open the member store, start the keep-alive pinger
    - Shutdown: stop the pinger, close the Mongo client
    """
    settings: Settings = app.state.settings

    # ---- Startup ----
    logger.info("=" * 60)
    logger.info("MEMBERS API STARTING")
    logger.info("=" * 60)
    for key, value in settings.summary().items():
        logger.info(f"{key}: {value}")

    store = MemberStore.from_settings(settings.mongo)
    app.state.member_store = store

    if store.collection is None:
        logger.error(f"⚠ Member store unavailable: {store.unavailable_reason}")
    elif await store.ping():
        logger.info("✓ MongoDB connection verified")
    else:
        logger.warning("⚠ Could not verify MongoDB connection")

    if not settings.media.configured:
        logger.warning("⚠ Cloudinary credentials missing, uploads will fail")

    pinger_task: Optional[asyncio.Task] = None
    if settings.keep_alive.enabled:
        if settings.keep_alive.is_loopback:
            logger.warning(
                f"⚠ Keep-alive pings {settings.keep_alive.url}, a loopback address; "
                "set KEEP_ALIVE_URL to the public /ping URL to prevent idle shutdown"
            )
        pinger = KeepAlivePinger(settings.keep_alive)
        app.state.pinger = pinger
        pinger_task = asyncio.create_task(pinger.start())

    logger.info(f"API ready to accept requests on port {settings.server_port}")

    yield  # Application runs here

    # ---- Shutdown ----
    logger.info("API shutting down...")
    if pinger_task is not None:
        await app.state.pinger.stop()
        pinger_task.cancel()
        try:
            await pinger_task
        except asyncio.CancelledError:
            pass
    await store.close()


# ============================================================
# Exception Handlers
# ============================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"message": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle malformed request bodies.

    Returns 400 with a short description of what failed.
    """
    logger.warning(f"Validation error: {exc.errors()}")
    problems = ", ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": problems or "Requisição inválida."}
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors and answer with a generic 500."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Erro interno do servidor."}
    )


# ============================================================
# FastAPI Application Factory
# ============================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around an explicit Settings object.

    The media uploader is created immediately. The member store and
    the pinger are created by the lifespan handler, since they own
    connections and tasks bound to the running event loop.
    """
    settings = settings or Settings()
    logging.getLogger().setLevel(settings.log_level)

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )
    app.state.settings = settings
    app.state.media_uploader = MediaUploader(settings.media)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(router, tags=["Members"])

    @app.get("/", tags=["Root"])
    async def root():
        """Basic service info and the list of endpoints."""
        return {
            "service": settings.api_title,
            "version": settings.api_version,
            "description": settings.api_description,
            "endpoints": {
                "list_members": "GET /members",
                "create_member": "POST /members",
                "update_member": "PUT /members/{id}",
                "delete_member": "DELETE /members/{id}",
                "upload_photo": "POST /upload",
                "ping": "GET /ping",
                "health": "GET /health",
                "docs": "GET /docs"
            },
            "timestamp": get_timestamp()
        }

    return app


app = create_app()


# ============================================================
# Run Configuration (for direct execution)
# ============================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "members_api.main:app",
        host="0.0.0.0",
        port=app.state.settings.server_port,
        reload=False,
        workers=1,
        log_level="info"
    )
