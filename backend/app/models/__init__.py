"""
Database Models for Split visibility
"""

from .database import (
    Base,
    # Enums
    AssessmentStatus,
    CitationBucket,
    # Models
    Workspace,
    Company,
    AssessmentRun,
    Question,
    Response,
    Citation,
    CompetitorRecord,
)

__all__ = [
    "Base",
    # Enums
    "AssessmentStatus",
    "CitationBucket",
    # Models
    "Workspace",
    "Company",
    "AssessmentRun",
    "Question",
    "Response",
    "Citation",
    "CompetitorRecord",
]
