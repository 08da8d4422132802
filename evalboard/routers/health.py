"""
Health Check Router - EvalBoard
evalboard/routers/health.py

Returns health status of the Snowflake and Redis dependencies with real
connection checks. Redis is optional: the API degrades to uncached reads
without it, so only Snowflake decides 200 vs 503.
"""
import asyncio
from datetime import datetime, timezone
from typing import Dict

import redis
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from snowflake.connector.errors import Error as SnowflakeError

from evalboard.config import settings
from evalboard.services import snowflake as snowflake_service

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/health", tags=["Health"])


#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]


#  Dependency Health Checks


def _short(error: Exception) -> str:
    msg = str(error)
    return msg[:100] + "..." if len(msg) > 100 else msg


def check_snowflake() -> str:
    """Check Snowflake connection health."""
    try:
        conn = snowflake_service.get_snowflake_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT CURRENT_USER()")
            result = cursor.fetchone()
            cursor.close()
        finally:
            conn.close()
        return f"healthy (User: {result[0]})"
    except SnowflakeError as e:
        return f"unhealthy: {_short(e)}"


def check_redis() -> str:
    """Check Redis connection health."""
    try:
        client = redis.from_url(settings.REDIS_URL, decode_responses=True, socket_connect_timeout=5)
        client.ping()
        client.close()
        return "healthy"
    except (redis.RedisError, ConnectionError) as e:
        return f"unhealthy: {_short(e)}"


#  Main Health Check Route


@router.get(
    "",
    response_model=HealthResponse,
    responses={
        200: {"description": "Database reachable"},
        503: {"description": "Database unreachable"},
    },
    summary="Health check",
    description="Check health of all dependencies.",
)
async def health_check():
    snowflake_status, redis_status = await asyncio.gather(
        asyncio.to_thread(check_snowflake),
        asyncio.to_thread(check_redis),
    )
    dependencies = {"snowflake": snowflake_status, "redis": redis_status}

    database_healthy = snowflake_status.startswith("healthy")
    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )

    if database_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )


#  Individual Service Health Checks


@router.get("/snowflake", summary="Check Snowflake connection")
async def health_snowflake():
    result = await asyncio.to_thread(check_snowflake)
    return {
        "service": "snowflake",
        "status": result,
        "is_healthy": result.startswith("healthy"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/redis", summary="Check Redis connection")
async def health_redis():
    result = await asyncio.to_thread(check_redis)
    return {
        "service": "redis",
        "status": result,
        "is_healthy": result.startswith("healthy"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
