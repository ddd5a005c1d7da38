"""
Application factory.

No module-level app exists, so importing this module never touches the upload
directory or the database. Serve it with `uvicorn --factory
inventory_api.api.main:create_app` (what run.py and main.py do).
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from ..core.config import Settings, get_settings
from ..core.errors import RepositoryError
from ..core.logger import get_logger
from ..repositories import build_repository
from ..routers.health import router as health_router
from ..routers.inventory import router as inventory_router
from ..services.inventory_service import InventoryService
from ..storage.blob_store import LocalBlobStore

logger = get_logger(__name__)


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application around its own repository and blob store.

    Args:
        settings: Configuration to use; defaults to the cached environment settings.

    Returns:
        A FastAPI app whose `state` holds `settings` and `inventory_service`.
    """
    settings = settings or get_settings()

    # Initialize FastAPI application with metadata and orjson for performance
    app = FastAPI(
        title=settings.APP_NAME,
        description="API for managing an inventory list of items and their photos.",
        version="1.0.0",
        default_response_class=ORJSONResponse,
        openapi_tags=[
            {"name": "Health", "description": "Service health and diagnostics"},
            {"name": "Inventory", "description": "Inventory items and photos"},
        ],
    )

    # Upload directory is created here, once per process.
    blob_store = LocalBlobStore(settings.UPLOAD_DIR)
    repository = build_repository(settings)
    app.state.settings = settings
    app.state.inventory_service = InventoryService(
        repository,
        blob_store,
        lock_stripes=settings.PHOTO_LOCK_STRIPES,
    )

    # CORS configuration driven by settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """FastAPI startup hook.

        Probes the item repository once. A failure is logged but does not stop the
        server; /health/db reports ongoing connectivity.
        """
        try:
            repository.ping()
        except RepositoryError as exc:
            logger.error("Error connecting to item repository", exc_info=exc, extra={"backend": settings.STORAGE_BACKEND})
        else:
            logger.info("Item repository reachable", extra={"backend": settings.STORAGE_BACKEND})

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutdown complete.")

    # Root health remains available (back-compat)
    @app.get("/", summary="Health Check (root)", tags=["Health"])
    def health_check_root():
        """Root-level health check.

        Returns:
            A simple JSON message indicating the service is healthy.
        """
        return {"message": "Healthy"}

    app.include_router(health_router)
    app.include_router(inventory_router)

    logger.info(
        "FastAPI app initialized",
        extra={"app_name": settings.APP_NAME, "env": settings.APP_ENV, "backend": settings.STORAGE_BACKEND},
    )
    return app


if __name__ == "__main__":
    # Allow running as: python -m inventory_api.api.main
    import uvicorn  # type: ignore

    _settings = get_settings()
    uvicorn.run(
        "inventory_api.api.main:create_app",
        factory=True,
        host=_settings.HOST,
        port=_settings.PORT,
        log_level="info",
    )
