import logging

from redis.asyncio import Redis, RedisCluster

logger = logging.getLogger(__name__)


def create_redis_client(url: str, cluster: bool = False):
    """Counter store client; a cluster client when the deployment is sharded"""
    if cluster:
        logger.info("Connecting to Redis cluster")
        return RedisCluster.from_url(url, decode_responses=True)
    return Redis.from_url(url, decode_responses=True)


async def flush_all(client) -> None:
    """Drop every key. Test environments only."""
    if isinstance(client, RedisCluster):
        await client.flushall(target_nodes=RedisCluster.PRIMARIES)
    else:
        await client.flushall()
