"""
Health API endpoints
"""

import time
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.core.config import config
from app.core.logger import logger
from app.db.mongodb import ping_database

router = APIRouter()

# Track service start time
start_time = time.time()


@router.get("/health")
def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "version": config.service_version,
    }


@router.get("/health/live")
def liveness_check():
    """Liveness check - is the app running"""
    return {
        "status": "alive",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "uptime": time.time() - start_time,
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check - the database answers and the event bus is wired"""
    database_ok = await ping_database()
    container = getattr(request.app.state, "container", None)

    checks = {
        "database": "healthy" if database_ok else "unhealthy",
        "event_bus": "healthy" if container is not None else "unhealthy",
    }
    body = {
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "checks": checks,
    }
    if container is not None:
        body["pending_event_handlers"] = container.event_bus.pending

    if all(state == "healthy" for state in checks.values()):
        return {"status": "ready", **body}

    logger.warning(
        "Readiness check failed",
        metadata={"event": "readiness_check_failed", "checks": checks}
    )
    return JSONResponse(status_code=503, content={"status": "not ready", **body})
