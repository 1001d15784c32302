"""Health check and system endpoints."""

import time
from datetime import datetime, timezone

import redis.asyncio as redis
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms import __version__
from hotel_cms.core.database import get_db_session
from hotel_cms.core.settings import get_settings
from hotel_cms.schemas.base import HealthCheckResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    Service health check endpoint.

    The database is required; Redis only backs rate limiting, so an
    unreachable Redis degrades the status instead of failing it.
    """
    settings = get_settings()
    dependencies = {}
    overall_status = "healthy"

    start = time.time()
    try:
        result = await session.execute(text("SELECT 1"))
        result.fetchone()
        dependencies["database"] = {
            "status": "healthy",
            "response_time_ms": round((time.time() - start) * 1000, 2),
        }
    except Exception as e:
        dependencies["database"] = {"status": "unhealthy", "error": str(e)}
        overall_status = "unhealthy"

    if settings.rate_limit_use_redis:
        client = redis.from_url(settings.redis_url, socket_connect_timeout=2)
        try:
            await client.ping()
            dependencies["redis"] = {"status": "healthy"}
        except redis.RedisError as e:
            dependencies["redis"] = {"status": "degraded", "error": str(e)}
            if overall_status == "healthy":
                overall_status = "degraded"
        finally:
            await client.aclose()
    else:
        dependencies["redis"] = {"status": "disabled"}

    health = HealthCheckResponse(
        success=overall_status != "unhealthy",
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        environment=settings.environment,
        dependencies=dependencies,
    )

    if overall_status == "unhealthy":
        return JSONResponse(status_code=503, content=health.model_dump())
    return health


@router.get("/version")
async def version_info():
    """Get service version information."""
    return {
        "success": True,
        "service": "hotel-cms",
        "version": __version__,
        "environment": get_settings().environment,
    }
