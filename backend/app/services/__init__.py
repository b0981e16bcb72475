"""
Business Logic Services
"""

from .competitor_aggregator import AggregatedCompetitor, aggregate_competitors
from .cumulative_scorer import CumulativeScores, calculate_cumulative_scores
from .ranker import RankedParticipant, rank_participants, select_smart_top, calculate_percentile
from .chart_builder import ChartPoint, build_chart_data
from .citation_normalizer import CitationNormalizer, MentionRecord, MentionFeed
from .response_summary import ResponseSummary, TopicGapEstimate, summarize_responses, estimate_topic_gaps
from .trend_analyzer import ScoreTrend, analyze_score_trend
from .visibility_service import VisibilityService

__all__ = [
    "AggregatedCompetitor",
    "aggregate_competitors",
    "CumulativeScores",
    "calculate_cumulative_scores",
    "RankedParticipant",
    "rank_participants",
    "select_smart_top",
    "calculate_percentile",
    "ChartPoint",
    "build_chart_data",
    "CitationNormalizer",
    "MentionRecord",
    "MentionFeed",
    "ResponseSummary",
    "TopicGapEstimate",
    "summarize_responses",
    "estimate_topic_gaps",
    "ScoreTrend",
    "analyze_score_trend",
    "VisibilityService",
]
