"""
Competitor Aggregator
Collapses per-run competitor rows into one cumulative record per competitor
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from app.adapters.storage import CompetitorRow


@dataclass
class AggregatedCompetitor:
    """A competitor summed across every completed run it appeared in"""
    name: str
    domain: Optional[str]
    cumulative_mention_score: float  # Sum of per-run mention rates, can exceed 1.0
    total_score: float  # Sum of per-run visibility scores
    assessment_count: int
    latest_score: float  # Highest single-run visibility score
    latest_rank: Optional[int]  # Rank reported by the run with the highest score


def aggregate_competitors(records: Iterable[CompetitorRow]) -> List[AggregatedCompetitor]:
    """
    Aggregate competitor rows by exact competitor name.

    Names are not normalized: "Acme" and "Acme Inc." stay separate
    competitors. Mention rates are summed, not averaged. When several
    rows share the highest visibility score the first one in input order
    wins, so callers must pass rows in a deterministic order.

    Returns aggregated competitors in order of first appearance.
    """
    aggregated: Dict[str, AggregatedCompetitor] = {}

    for record in records:
        existing = aggregated.get(record.competitor_name)

        if existing is None:
            aggregated[record.competitor_name] = AggregatedCompetitor(
                name=record.competitor_name,
                domain=record.competitor_domain or None,
                cumulative_mention_score=record.per_run_mention_rate,
                total_score=record.ai_visibility_score,
                assessment_count=1,
                latest_score=record.ai_visibility_score,
                latest_rank=record.rank_position,
            )
            continue

        existing.cumulative_mention_score += record.per_run_mention_rate
        existing.total_score += record.ai_visibility_score
        existing.assessment_count += 1

        if record.ai_visibility_score > existing.latest_score:
            existing.latest_score = record.ai_visibility_score
            existing.latest_rank = record.rank_position

        if existing.domain is None and record.competitor_domain:
            existing.domain = record.competitor_domain

    return list(aggregated.values())
