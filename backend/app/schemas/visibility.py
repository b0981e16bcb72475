"""
Visibility Snapshot Schemas
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SnapshotStatus(str, Enum):
    READY = "ready"
    NO_DOMAIN = "no_domain"          # Workspace has no configured domain
    NO_COMPANY = "no_company"        # Domain does not resolve to a company
    NO_ASSESSMENT = "no_assessment"  # No completed runs yet


class ScoreSection(BaseModel):
    overall_score: float = 0.0  # 0-1
    trend_period: str = "30 days"
    trend_change: float = 0.0
    trend_direction: str = "stable"
    mention_rate: float = 0.0
    sentiment_score: float = 0.0
    citation_score: float = 0.0
    competitive_score: float = 0.0


class MentionRecordSchema(BaseModel):
    id: UUID
    question: str
    match_type: str
    snippet: str
    mention_quote: str
    created_at: datetime
    url: Optional[str] = None
    domain: Optional[str] = None
    title: Optional[str] = None
    favicon: Optional[str] = None
    influence_score: float = 0.0
    sentiment: Optional[str] = None


class CitationSection(BaseModel):
    direct_count: int = 0
    indirect_count: int = 0
    total_count: int = 0
    coverage_rate: float = 0.0
    all_mentions: List[MentionRecordSchema] = Field(default_factory=list)
    recent_mentions: List[MentionRecordSchema] = Field(default_factory=list)


class RankedParticipantSchema(BaseModel):
    name: str
    domain: Optional[str] = None
    cumulative_mention_score: float
    visibility_score: float = 0.0
    assessment_count: int = 0
    is_subject: bool = False
    rank: int


class CompetitiveSection(BaseModel):
    current_rank: int = 0
    total_competitors: int = 0
    competitors: List[RankedParticipantSchema] = Field(default_factory=list)
    top10_competitors: List[RankedParticipantSchema] = Field(default_factory=list)
    percentile: int = 0
    share_of_voice: float = 0.0
    total_market_mentions: float = 0.0


class TopicGapSchema(BaseModel):
    name: str
    mention_count: int
    mention_percentage: float
    has_gap: bool
    rank: int
    is_estimate: bool = True


class ChartPointSchema(BaseModel):
    date_label: str
    score: float
    full_timestamp: str
    is_current_period: bool
    time_label: Optional[str] = None
    run_id: Optional[UUID] = None


class CumulativeData(BaseModel):
    total_assessments: int = 0
    user_cumulative_mentions: float = 0.0
    total_market_mentions: float = 0.0
    cumulative_share_of_voice: float = 0.0


class SummarySection(BaseModel):
    questions_analyzed: int = 0
    mentions_found: int = 0
    coverage_rate: float = 0.0
    sentiment_breakdown: Dict[str, int] = Field(
        default_factory=lambda: {"positive": 0, "neutral": 0, "negative": 0}
    )


class CompetitiveSnapshot(BaseModel):
    """Cumulative competitive visibility picture for one workspace"""
    model_config = ConfigDict(populate_by_name=True)

    score: ScoreSection = Field(default_factory=ScoreSection)
    citations: CitationSection = Field(default_factory=CitationSection)
    competitive: CompetitiveSection = Field(default_factory=CompetitiveSection)
    topics: List[TopicGapSchema] = Field(default_factory=list)
    chart_data: List[ChartPointSchema] = Field(default_factory=list, alias="chartData")
    cumulative_data: CumulativeData = Field(default_factory=CumulativeData)
    summary: SummarySection = Field(default_factory=SummarySection)
    assessment_id: Optional[UUID] = None
    last_updated: Optional[datetime] = None
    degraded_sections: List[str] = Field(default_factory=list)


class VisibilityResult(BaseModel):
    status: SnapshotStatus
    message: Optional[str] = None
    data: Optional[CompetitiveSnapshot] = None


class VisibilityResponse(BaseModel):
    """API envelope"""
    success: bool
    status: SnapshotStatus
    message: Optional[str] = None
    data: Optional[CompetitiveSnapshot] = None


class InvalidateResponse(BaseModel):
    success: bool
    invalidated: bool
