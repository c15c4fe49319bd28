"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from archetype_engine.db.pool import db_health_check
from archetype_engine.features.archetypes.jobs import archetype_assignment_job

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "archetype-engine"}


@router.get("/readyz")
async def readyz():
    """Readiness check covering the database pool and the assignment job."""
    checks = {}

    t0 = time.time()
    db_health = await db_health_check()
    checks["database"] = {
        "ok": db_health.get("healthy", False),
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    if "pool_stats" in db_health:
        checks["database"]["pool_stats"] = db_health["pool_stats"]
    if "warnings" in db_health:
        checks["database"]["warnings"] = db_health["warnings"]
    if not checks["database"]["ok"]:
        checks["database"]["error"] = db_health.get("error", "Database unhealthy")

    checks["archetype_job"] = archetype_assignment_job.get_job_status()

    return {"overall_ok": checks["database"]["ok"], "checks": checks}
