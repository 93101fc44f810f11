import logging

from fastapi import APIRouter, Depends
from redis.exceptions import RedisError

from src.depends import get_redis

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health(redis=Depends(get_redis)):
    """Liveness plus counter store reachability"""
    try:
        redis_ok = bool(await redis.ping())
    except RedisError as exc:
        logger.warning(f"Redis ping failed: {exc}")
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
