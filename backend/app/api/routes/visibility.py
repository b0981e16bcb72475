"""
MAX Visibility API Routes
Cumulative competitive visibility snapshot and cache invalidation
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from redis.exceptions import RedisError

from app.adapters.storage import RepositoryError, SQLAlchemyVisibilityRepository
from app.schemas.visibility import InvalidateResponse, VisibilityResponse
from app.services.visibility_cache import get_snapshot_cached, invalidate_snapshot
from app.services.visibility_service import VisibilityService
from app.utils import get_session_maker, visibility_cache
from app.utils.cache import VisibilityCache

logger = logging.getLogger(__name__)

router = APIRouter()


def get_visibility_service() -> VisibilityService:
    """Dependency building the service over the SQL repository"""
    return VisibilityService(SQLAlchemyVisibilityRepository(get_session_maker()))


def get_visibility_cache() -> VisibilityCache:
    return visibility_cache


@router.get("/{workspace_id}", response_model=VisibilityResponse)
async def get_visibility(
    workspace_id: UUID,
    refresh: bool = Query(False, description="Bypass the cached snapshot"),
    service: VisibilityService = Depends(get_visibility_service),
    cache: VisibilityCache = Depends(get_visibility_cache),
):
    """Get the cumulative visibility snapshot for a workspace."""
    try:
        result = await get_snapshot_cached(service, cache, workspace_id, refresh=refresh)
    except RepositoryError as e:
        logger.error(f"Visibility data error for workspace {workspace_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve visibility data. Please try again shortly.",
        )

    return VisibilityResponse(
        success=True,
        status=result.status,
        message=result.message,
        data=result.data,
    )


@router.post("/{workspace_id}/invalidate", response_model=InvalidateResponse)
async def invalidate_visibility(
    workspace_id: UUID,
    cache: VisibilityCache = Depends(get_visibility_cache),
):
    """Drop the cached snapshot after an assessment completes."""
    try:
        invalidated = await invalidate_snapshot(cache, workspace_id)
    except RedisError as e:
        logger.error(f"Visibility cache invalidation failed for {workspace_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cache unavailable",
        )

    return InvalidateResponse(success=True, invalidated=invalidated)
