from fastapi import APIRouter, HTTPException, Request

from ..core.errors import RepositoryError
from ..core.logger import get_logger
from ..models.schemas import HealthResponse

router = APIRouter(prefix="/health", tags=["Health"])

_logger = get_logger(__name__)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=HealthResponse,
    summary="Service health",
    description=(
        "Liveness/health endpoint. Always returns 200 when the app is up. "
        "The item repository is not queried here."
    ),
    responses={
        200: {"description": "Service is healthy"},
    },
)
def get_health(request: Request) -> HealthResponse:
    """
    Root health indicator used for liveness. Always returns 200 with {'status':'ok'}.
    Safe when the database is unreachable.
    """
    settings = request.app.state.settings
    _logger.info(
        "Health diagnostics",
        extra={
            "env": settings.APP_ENV,
            "storage_backend": settings.STORAGE_BACKEND,
            "upload_dir": settings.UPLOAD_DIR,
        },
    )
    return HealthResponse(status="ok")


# PUBLIC_INTERFACE
@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Service health (alias)",
    description="Alias health endpoint commonly used by platforms for liveness checks.",
    responses={200: {"description": "Service is healthy"}},
)
def get_healthz(request: Request) -> HealthResponse:
    """Alias of /health that returns the same response payload."""
    return get_health(request)


# PUBLIC_INTERFACE
@router.get(
    "/db",
    response_model=HealthResponse,
    summary="Repository connectivity",
    description="Pings the configured item repository (SELECT 1 for the SQL backend).",
    responses={
        200: {"description": "Repository reachable"},
        503: {"description": "Repository unavailable"},
    },
)
def health_db(request: Request) -> HealthResponse:
    """
    Repository connectivity health check.

    Returns 200 with {"status":"ok"} on success and 503 on failure. The failure detail
    is logged; the response only names the backend.
    """
    settings = request.app.state.settings
    repository = request.app.state.inventory_service.repository
    try:
        repository.ping()
    except RepositoryError as exc:
        _logger.error("Repository connectivity failed", exc_info=exc, extra={"backend": settings.STORAGE_BACKEND})
        raise HTTPException(status_code=503, detail=f"database_unavailable: backend={settings.STORAGE_BACKEND}")
    _logger.info("Repository connectivity OK via /health/db", extra={"backend": settings.STORAGE_BACKEND})
    return HealthResponse(status="ok")
