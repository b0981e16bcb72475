"""
Pydantic Schemas for API Request/Response validation
"""

from .visibility import (
    SnapshotStatus,
    ScoreSection,
    MentionRecordSchema,
    CitationSection,
    RankedParticipantSchema,
    CompetitiveSection,
    TopicGapSchema,
    ChartPointSchema,
    CumulativeData,
    SummarySection,
    CompetitiveSnapshot,
    VisibilityResult,
    VisibilityResponse,
    InvalidateResponse,
)

__all__ = [
    "SnapshotStatus",
    "ScoreSection",
    "MentionRecordSchema",
    "CitationSection",
    "RankedParticipantSchema",
    "CompetitiveSection",
    "TopicGapSchema",
    "ChartPointSchema",
    "CumulativeData",
    "SummarySection",
    "CompetitiveSnapshot",
    "VisibilityResult",
    "VisibilityResponse",
    "InvalidateResponse",
]
