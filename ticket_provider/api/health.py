"""Health check endpoints."""
import logging

from fastapi import APIRouter

from ticket_provider.api.models import HealthResponse
from ticket_provider.interaction import get_orchestrator

log = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    """Health check endpoint.

    Returns service status and number of registered entitlement checkers.
    """
    try:
        orchestrator = get_orchestrator()
        return HealthResponse(ok=True, checkers_loaded=len(orchestrator.registry))
    except RuntimeError as e:
        log.warning(f"Health check warning: {e}")
        return HealthResponse(ok=True, checkers_loaded=0)
