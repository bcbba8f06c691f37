import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from golink_app.api.v1 import golinks
from golink_app.config import Settings, settings
from golink_app.services.exceptions import BackendFailureError, GolinkServiceError
from golink_app.storage.exceptions import BackendFaultError
from golink_app.storage.factory import StorageBackend, StorageFactory
from golink_app.storage.strategies import GolinkStorage

logger = logging.getLogger(__name__)


def build_storage(app_settings: Settings) -> GolinkStorage:
    """
    Build the one storage backend this process will use.

    A SQLite failure aborts startup unless storage_fallback_to_memory is set.
    """
    backend = StorageBackend(app_settings.storage_backend)
    try:
        return StorageFactory.create(backend, database_path=app_settings.database_path)
    except BackendFaultError as e:
        if not app_settings.storage_fallback_to_memory:
            logger.error("❌ Storage initialization failed: %s", e.detail)
            raise
        logger.warning("⚠️  Storage initialization failed (%s), falling back to memory", e.detail)
        return StorageFactory.create(StorageBackend.MEMORY)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Create the FastAPI app; storage is built once when the app starts"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.storage = build_storage(app_settings)
        try:
            yield
        finally:
            await app.state.storage.close()

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="A golink registry built with FastAPI",
        debug=app_settings.debug,
        lifespan=lifespan
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GolinkServiceError)
    async def golink_error_handler(request: Request, exc: GolinkServiceError):
        """Render service errors as {"error": ...} with the mapped status"""
        if isinstance(exc, BackendFailureError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "environment": app_settings.environment,
            "storage_backend": type(app.state.storage).__name__,
        }

    # Include routers
    app.include_router(golinks.router)
    return app


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

# Create FastAPI app
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
