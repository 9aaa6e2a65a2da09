"""Health check endpoints."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from orchestrator.core import SearchOrchestrator
from server.dependencies import get_orchestrator
from server.schemas.responses import HealthResponseDTO, ProviderCheckDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])

PROVIDER_CHECK_TIMEOUT_S = 15.0


@router.get("/health", response_model=HealthResponseDTO)
async def health_check():
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        version="1.0.0",
    )


@router.get("/health/provider", response_model=ProviderCheckDTO)
async def provider_check(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """One tiny non-search completion to confirm the credential and model work."""
    try:
        output = await asyncio.wait_for(
            asyncio.to_thread(orchestrator.client.ping, orchestrator.registry.default_model),
            timeout=PROVIDER_CHECK_TIMEOUT_S,
        )
    except asyncio.TimeoutError:
        return JSONResponse(
            status_code=504,
            content=ProviderCheckDTO(ok=False, error="provider check timed out").model_dump(),
        )
    except Exception as exc:
        logger.warning(
            "Provider check failed",
            extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
        )
        return JSONResponse(
            status_code=502,
            content=ProviderCheckDTO(ok=False, error=str(exc) or type(exc).__name__).model_dump(),
        )
    return ProviderCheckDTO(ok=True, output=output)
