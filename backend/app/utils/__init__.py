"""
Utility modules for the Split visibility service
"""

from .database import (
    get_session_maker,
    init_db,
    close_db,
)
from .cache import (
    visibility_cache,
    get_redis,
    close_redis,
)

__all__ = [
    # Database
    "get_session_maker",
    "init_db",
    "close_db",
    # Cache
    "visibility_cache",
    "get_redis",
    "close_redis",
]
