"""Health check routes."""

from fastapi import APIRouter, Depends
from users_common.config.store_config import StoreConfig, get_store_config

from users_api.config import Settings, get_settings
from users_api.models.health import HealthCheckResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    store_config: StoreConfig = Depends(get_store_config),
) -> HealthCheckResponse:
    """Health check endpoint.

    Reports ``degraded`` when Cosmos is selected but no endpoint is set; the
    users routes will fail with 500 in that state.
    """
    configured = store_config.store_backend == "memory" or bool(store_config.azure_cosmosdb_endpoint)
    return HealthCheckResponse(
        status="ok" if configured else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        store_backend=store_config.store_backend,
        store_configured=configured,
    )
