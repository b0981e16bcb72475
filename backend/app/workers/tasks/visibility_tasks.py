"""
Visibility Tasks
React to finished assessments: drop the stale snapshot and warm a fresh one
"""

import asyncio
from typing import Dict
from uuid import UUID

from celery.utils.log import get_task_logger

from app.adapters.storage import RepositoryError, SQLAlchemyVisibilityRepository
from app.services.visibility_cache import get_snapshot_cached, invalidate_snapshot
from app.services.visibility_service import VisibilityService
from app.utils import close_db, close_redis, get_session_maker
from app.utils.cache import VisibilityCache
from app.workers.celery_app import celery_app

logger = get_task_logger(__name__)


def run_async(coro):
    """Run async function in sync context"""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _refresh_workspace_snapshot(workspace_id: UUID) -> Dict:
    cache = VisibilityCache()
    try:
        await invalidate_snapshot(cache, workspace_id)

        service = VisibilityService(SQLAlchemyVisibilityRepository(get_session_maker()))
        result = await get_snapshot_cached(service, cache, workspace_id, refresh=True)
        return {
            "success": True,
            "workspace_id": str(workspace_id),
            "status": result.status.value,
        }
    finally:
        # Pools are bound to this task's event loop
        await close_db()
        await close_redis()


@celery_app.task(
    bind=True,
    name="app.workers.tasks.visibility_tasks.handle_assessment_completed",
    max_retries=3,
    default_retry_delay=15,
)
def handle_assessment_completed(self, workspace_id: str) -> Dict:
    """
    Invalidate and rebuild the cached snapshot once a run completes.

    Args:
        workspace_id: UUID of the workspace whose run just completed

    Returns:
        Dict with the status of the rebuilt snapshot
    """
    try:
        result = run_async(_refresh_workspace_snapshot(UUID(workspace_id)))
        logger.info(f"Visibility snapshot refreshed for workspace {workspace_id}: {result['status']}")
        return result
    except RepositoryError as e:
        logger.warning(f"Repository error refreshing workspace {workspace_id}, retrying: {e}")
        raise self.retry(exc=e)
