import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .errors import AppError
from .routes.auth import router as auth_router
from .routes.ideas import router as ideas_router
from .schemas.common import first_error_message
from .services.auth_utils import configure_password_hashing
from .storage import Storage, build_storage

logger = logging.getLogger(__name__)

API_VERSION = __version__


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    """Build the API.

    Parameters
    ----------
    settings : Settings, optional
        Overrides the environment-derived settings (and the ``get_settings``
        dependency) for this app instance.
    storage : Storage, optional
        A pre-built storage backend. When omitted, the lifespan builds one
        from ``settings``. Either way the lifespan owns ``init()``/``close()``.
    """
    app_settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_password_hashing(app_settings.bcrypt_rounds)
        backend = storage or build_storage(app_settings)
        backend.init()
        purged = backend.purge_expired_sessions()
        app.state.storage = backend

        print("Starting IdeaScore API")
        print(f"   Storage:     {backend.backend_name}")
        if backend.backend_name == "sql":
            print(f"   Database:    {app_settings.database_url.split('@')[-1]}")
        print(f"   Sessions:    cookie '{app_settings.session_cookie_name}', ttl {app_settings.session_ttl_hours}h"
              f"{' (secure)' if app_settings.is_production else ''}")
        if purged:
            print(f"   Purged {purged} expired session(s)")
        print("   Ready to score startup ideas!")

        yield

        print("Shutting down IdeaScore API")
        backend.close()
        app.state.storage = None

    app = FastAPI(
        title="IdeaScore: Startup Idea Viability Scoring",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(app_settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(ideas_router)

    @app.get(
        "/",
        summary="API Root",
        description="Welcome endpoint with API information",
        tags=["General"],
    )
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "IdeaScore",
            "version": API_VERSION,
            "description": "Deterministic startup idea viability scoring",
            "docs": "/docs",
            "endpoints": {
                "register": "POST /api/register",
                "login": "POST /api/login",
                "ideas": "GET|POST /api/ideas",
                "idea": "GET|PUT|DELETE /api/ideas/{id}",
            },
        }

    @app.get(
        "/health",
        summary="Global Health Check",
        description="Check if the API server is running",
        tags=["General"],
    )
    async def health():
        """Global health check endpoint."""
        return {
            "status": "healthy",
            "service": "ideascore",
            "version": API_VERSION,
        }

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Domain errors carry their own status code and message."""
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report the first validation problem as a 400."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": first_error_message(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"message": "Internal server error"}
        if app_settings.debug:
            content["detail"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    return app


def _configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_configure_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "ideascore.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
    )
