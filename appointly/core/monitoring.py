"""Health checks for load balancers and on-call"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from redis.exceptions import RedisError

from appointly.config.database import get_db
from appointly.config.settings import get_settings

health_router = APIRouter()


@health_router.get("")
async def health_check():
    """Liveness only, touches nothing"""
    return {"status": "healthy", "service": "appointly-api"}


def _lock_backend_status(backend: str) -> str:
    # The in-memory lock lives in this process, so it is healthy whenever we are
    if backend != "redis":
        return "healthy"

    from appointly.config.redis import get_redis

    try:
        get_redis().ping()
        return "healthy"
    except RedisError as e:
        return f"unhealthy: {e}"


@health_router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Database reachability and the booking lock backend"""
    backend = get_settings().BOOKING_LOCK_BACKEND.lower()
    checks = {
        "api": "healthy",
        "database": "unknown",
        "booking_lock": "unknown",
        "booking_lock_backend": backend,
    }

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {e}"

    checks["booking_lock"] = _lock_backend_status(backend)

    probes = (checks["api"], checks["database"], checks["booking_lock"])
    checks["overall"] = "healthy" if all(p == "healthy" for p in probes) else "degraded"
    return checks
