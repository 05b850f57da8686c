"""
Health Check Endpoints

Endpoints:
- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database and keyword table usable)
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Dict, Any
import time

from sqlalchemy import text

from app.core.config import settings
from app.core.database import get_session_local
from app.core.logging_config import logger
from app.config.config_loader import get_keyword_matcher


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity and that the schema exists"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            await session.execute(text("SELECT COUNT(*) FROM templates"))

        return {
            "status": "healthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
        }
    except Exception as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": type(e).__name__,
        }


def check_keyword_table() -> Dict[str, Any]:
    """Check the keyword mapping table loads"""
    try:
        matcher = get_keyword_matcher()
        return {"status": "healthy", "mappings": len(matcher.mappings)}
    except (OSError, ValueError) as e:
        logger.error(f"[HealthCheck] Keyword table check failed: {e}")
        return {"status": "unhealthy", "error": type(e).__name__}


@router.get("/live")
async def liveness():
    """Liveness probe: the process is serving requests"""
    return {"status": "alive", "timestamp": datetime.utcnow().isoformat()}


@router.get("/ready")
async def readiness():
    """Readiness probe: 503 when any dependency check fails"""
    checks = {
        "database": await check_database(),
        "keyword_table": check_keyword_table(),
    }
    healthy = all(check["status"] == "healthy" for check in checks.values())

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "ready" if healthy else "not_ready",
            "service": settings.APP_NAME,
            "checks": checks,
        },
    )
