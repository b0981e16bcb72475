"""
Celery Tasks
"""

from .visibility_tasks import handle_assessment_completed

__all__ = [
    "handle_assessment_completed",
]
