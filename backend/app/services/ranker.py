"""
Competitive Ranker
Orders the subject and its competitors by cumulative mention score
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from app.services.competitor_aggregator import AggregatedCompetitor


@dataclass
class RankedParticipant:
    """An entry in the competitive leaderboard"""
    name: str
    domain: Optional[str]
    cumulative_mention_score: float
    visibility_score: float
    assessment_count: int
    is_subject: bool
    rank: int = 0


def rank_participants(
    subject_name: str,
    subject_domain: Optional[str],
    subject_score: float,
    competitors: Iterable[AggregatedCompetitor],
    subject_visibility_score: float = 0.0,
    subject_assessment_count: int = 0,
) -> List[RankedParticipant]:
    """
    Rank the subject company together with all aggregated competitors.

    Sorted by cumulative mention score, highest first. Equal scores are
    ordered by name, with the subject ahead of a competitor that carries
    the same name. Ranks are 1-based positions: ties never share a rank.
    """
    participants = [
        RankedParticipant(
            name=subject_name,
            domain=subject_domain,
            cumulative_mention_score=subject_score,
            visibility_score=subject_visibility_score,
            assessment_count=subject_assessment_count,
            is_subject=True,
        )
    ]
    participants.extend(
        RankedParticipant(
            name=c.name,
            domain=c.domain,
            cumulative_mention_score=c.cumulative_mention_score,
            visibility_score=c.latest_score,
            assessment_count=c.assessment_count,
            is_subject=False,
        )
        for c in competitors
    )

    ordered = sorted(
        participants,
        key=lambda p: (-p.cumulative_mention_score, p.name, not p.is_subject),
    )

    return [replace(p, rank=index) for index, p in enumerate(ordered, start=1)]


def find_subject(ranked: List[RankedParticipant]) -> Optional[RankedParticipant]:
    for participant in ranked:
        if participant.is_subject:
            return participant
    return None


def select_smart_top(ranked: List[RankedParticipant], limit: int = 10) -> List[RankedParticipant]:
    """
    Pick the leaderboard rows to display.

    The subject is always visible: when it ranks inside the top `limit`
    the true top `limit` is returned; otherwise the last slot is given to
    the subject, which keeps its real rank (e.g. 47).
    """
    if limit <= 0:
        return []

    subject = find_subject(ranked)
    if subject is None or subject.rank <= limit:
        return ranked[:limit]

    return ranked[:limit - 1] + [subject]


def calculate_percentile(rank: int, total: int) -> int:
    """Share of participants at or below the given rank, as a whole percent"""
    if total <= 0 or rank <= 0:
        return 0
    return round(((total - rank + 1) / total) * 100)
