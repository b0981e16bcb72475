"""Tests for the cache-aside snapshot wrapper."""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.schemas.visibility import CompetitiveSnapshot, SnapshotStatus, VisibilityResult
from app.services.visibility_cache import get_snapshot_cached, invalidate_snapshot
from app.utils.cache import VisibilityCache
from tests.factories import WORKSPACE_ID


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.get.return_value = None
    client.setex.return_value = True
    client.delete.return_value = 1
    with patch("app.utils.cache.get_redis", AsyncMock(return_value=client)):
        yield client


@pytest.fixture
def cache(settings):
    return VisibilityCache()


def service_returning(result: VisibilityResult):
    service = AsyncMock()
    service.get_snapshot.return_value = result
    return service


def ready_result() -> VisibilityResult:
    snapshot = CompetitiveSnapshot()
    snapshot.competitive.share_of_voice = 25.0
    return VisibilityResult(status=SnapshotStatus.READY, data=snapshot)


async def test_miss_computes_and_stores(redis_client, cache, settings):
    service = service_returning(ready_result())

    result = await get_snapshot_cached(service, cache, WORKSPACE_ID)

    assert result.status == SnapshotStatus.READY
    service.get_snapshot.assert_awaited_once_with(WORKSPACE_ID)
    key, ttl, payload = redis_client.setex.await_args.args
    assert key == f"{settings.VISIBILITY_CACHE_PREFIX}:{WORKSPACE_ID}"
    assert ttl == settings.VISIBILITY_CACHE_TTL
    assert '"chartData"' in payload


async def test_hit_skips_the_service(redis_client, cache):
    redis_client.get.return_value = ready_result().model_dump_json(by_alias=True)
    service = service_returning(ready_result())

    result = await get_snapshot_cached(service, cache, WORKSPACE_ID)

    service.get_snapshot.assert_not_awaited()
    assert result.status == SnapshotStatus.READY
    assert result.data.competitive.share_of_voice == 25.0


async def test_refresh_bypasses_read_and_overwrites(redis_client, cache):
    redis_client.get.return_value = ready_result().model_dump_json(by_alias=True)
    service = service_returning(ready_result())

    await get_snapshot_cached(service, cache, WORKSPACE_ID, refresh=True)

    redis_client.get.assert_not_awaited()
    service.get_snapshot.assert_awaited_once()
    redis_client.setex.assert_awaited_once()


@pytest.mark.parametrize("status", [SnapshotStatus.NO_DOMAIN, SnapshotStatus.NO_COMPANY])
async def test_unconfigured_states_are_not_stored(redis_client, cache, status):
    service = service_returning(VisibilityResult(status=status, message="configure"))

    result = await get_snapshot_cached(service, cache, WORKSPACE_ID)

    assert result.status == status
    redis_client.setex.assert_not_awaited()


async def test_no_assessment_is_stored(redis_client, cache):
    service = service_returning(
        VisibilityResult(status=SnapshotStatus.NO_ASSESSMENT, data=CompetitiveSnapshot())
    )

    await get_snapshot_cached(service, cache, WORKSPACE_ID)

    redis_client.setex.assert_awaited_once()


async def test_redis_read_failure_falls_back_to_service(redis_client, cache):
    redis_client.get.side_effect = RedisConnectionError("down")
    service = service_returning(ready_result())

    result = await get_snapshot_cached(service, cache, WORKSPACE_ID)

    assert result.status == SnapshotStatus.READY
    service.get_snapshot.assert_awaited_once()


async def test_redis_write_failure_still_returns_result(redis_client, cache):
    redis_client.setex.side_effect = RedisConnectionError("down")
    service = service_returning(ready_result())

    result = await get_snapshot_cached(service, cache, WORKSPACE_ID)

    assert result.data.competitive.share_of_voice == 25.0


async def test_invalidate_deletes_workspace_key(redis_client, cache, settings):
    assert await invalidate_snapshot(cache, WORKSPACE_ID) is True
    redis_client.delete.assert_awaited_once_with(f"{settings.VISIBILITY_CACHE_PREFIX}:{WORKSPACE_ID}")


async def test_invalidate_missing_key(redis_client, cache):
    redis_client.delete.return_value = 0

    assert await invalidate_snapshot(cache, WORKSPACE_ID) is False
