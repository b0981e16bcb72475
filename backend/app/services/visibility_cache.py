"""
Cache-aside wrapper around the visibility service

Caching is a caller-side policy: the service always computes from the
repository, this module decides when a stored result may be reused.
"""

import logging
from uuid import UUID

from redis.exceptions import RedisError

from app.schemas.visibility import SnapshotStatus, VisibilityResult
from app.services.visibility_service import VisibilityService
from app.utils.cache import VisibilityCache

logger = logging.getLogger(__name__)

CACHEABLE_STATUSES = {SnapshotStatus.READY, SnapshotStatus.NO_ASSESSMENT}


async def get_snapshot_cached(
    service: VisibilityService,
    cache: VisibilityCache,
    workspace_id: UUID,
    refresh: bool = False,
) -> VisibilityResult:
    """
    Return a cached visibility result, computing and storing it on a miss.

    Args:
        refresh: Skip the cache read and overwrite the stored result

    Redis failures never hide the snapshot: they are logged and the fresh
    result is returned.
    """
    key = str(workspace_id)

    if not refresh:
        try:
            cached = await cache.get_result(key)
        except RedisError as e:
            logger.warning(f"Visibility cache read failed for {key}: {e}")
            cached = None

        if isinstance(cached, dict):
            logger.info(f"Visibility cache hit for workspace {key}")
            return VisibilityResult.model_validate(cached)

    result = await service.get_snapshot(workspace_id)

    if result.status in CACHEABLE_STATUSES:
        try:
            await cache.set_result(key, result.model_dump(mode="json", by_alias=True))
        except RedisError as e:
            logger.warning(f"Visibility cache write failed for {key}: {e}")

    return result


async def invalidate_snapshot(cache: VisibilityCache, workspace_id: UUID) -> bool:
    """Drop the cached result once a new assessment completes"""
    invalidated = await cache.invalidate(str(workspace_id))
    logger.info(f"Invalidated visibility cache for workspace {workspace_id}: {invalidated}")
    return invalidated
