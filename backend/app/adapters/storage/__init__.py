"""
Storage Adapters - Read access to assessment data
"""

from .base import (
    VisibilityRepository,
    RepositoryError,
    WorkspaceRecord,
    CompanyRecord,
    RunRecord,
    QuestionRecord,
    ResponseRecord,
    CitationRow,
    CompetitorRow,
)
from .sqlalchemy_repository import SQLAlchemyVisibilityRepository

__all__ = [
    # Base classes
    "VisibilityRepository",
    "RepositoryError",
    # Records
    "WorkspaceRecord",
    "CompanyRecord",
    "RunRecord",
    "QuestionRecord",
    "ResponseRecord",
    "CitationRow",
    "CompetitorRow",
    # Implementations
    "SQLAlchemyVisibilityRepository",
]
