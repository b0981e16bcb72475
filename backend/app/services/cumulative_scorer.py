"""
Cumulative Scorer
Share of voice across every completed run of a workspace

Formula: SOV = user cumulative mentions / (user + all competitor cumulative mentions) × 100
"""

from dataclasses import dataclass
from typing import Iterable, List

from app.adapters.storage import RunRecord
from app.services.competitor_aggregator import AggregatedCompetitor


@dataclass
class CumulativeScores:
    total_assessments: int
    user_cumulative_mention_score: float
    total_cumulative_mentions: float
    cumulative_share_of_voice: float  # 0-100


def calculate_cumulative_scores(
    runs: Iterable[RunRecord],
    competitors: Iterable[AggregatedCompetitor],
) -> CumulativeScores:
    """
    Calculate the subject's cumulative mention score and share of voice.

    Every completed run contributes; none are dropped or deduplicated,
    so adding a run can only grow the market total.
    """
    run_list: List[RunRecord] = list(runs)

    user_score = sum(run.per_run_mention_rate for run in run_list)
    competitor_score = sum(c.cumulative_mention_score for c in competitors)
    total = user_score + competitor_score

    share_of_voice = (user_score / total) * 100 if total > 0 else 0.0

    return CumulativeScores(
        total_assessments=len(run_list),
        user_cumulative_mention_score=user_score,
        total_cumulative_mentions=total,
        cumulative_share_of_voice=share_of_voice,
    )
