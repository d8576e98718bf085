"""Health check and status endpoints."""

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from keygate.config import settings

# Module-level variable to track application start time
_app_start_time = time.time()

router = APIRouter(tags=["Health"])


@router.get("/status")
async def get_status() -> JSONResponse:
    """
    Health check endpoint for monitoring and load balancers.

    Returns basic API status without authentication.

    Returns:
        JSONResponse with status, version, environment and uptime_seconds
    """
    uptime_seconds = int(time.time() - _app_start_time)

    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "version": settings.api_version,
            "environment": settings.environment,
            "origin_policy_enforced": settings.is_hardened,
            "uptime_seconds": uptime_seconds,
        },
    )
