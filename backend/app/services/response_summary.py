"""
Response Summarizer & Topic Gap Estimator

The topic gap estimate is a placeholder heuristic: it does NOT classify
questions by topic. It scales the overall mention rate by a per-topic
factor from a PRNG seeded with the workspace id, so the same workspace
always gets the same estimates. Every estimate is flagged `is_estimate`.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from app.adapters.storage import QuestionRecord, ResponseRecord
from app.config import TOPIC_CATALOG


@dataclass
class ResponseSummary:
    questions_analyzed: int = 0
    mentions_found: int = 0
    coverage_rate: float = 0.0
    sentiment_breakdown: Dict[str, int] = field(
        default_factory=lambda: {"positive": 0, "neutral": 0, "negative": 0}
    )


@dataclass
class TopicGapEstimate:
    name: str
    mention_count: int
    mention_percentage: float
    has_gap: bool
    rank: int
    is_estimate: bool = True


def summarize_responses(
    questions: Sequence[QuestionRecord],
    responses: Iterable[ResponseRecord],
) -> ResponseSummary:
    """Count questions whose answers mention the subject"""
    summary = ResponseSummary(questions_analyzed=len(questions))
    question_ids = {q.id for q in questions}
    mentioned_questions = set()

    for response in responses:
        if response.question_id not in question_ids or not response.mention_detected:
            continue
        mentioned_questions.add(response.question_id)

        sentiment = (response.mention_sentiment or "neutral").lower()
        if sentiment not in summary.sentiment_breakdown:
            sentiment = "neutral"
        summary.sentiment_breakdown[sentiment] += 1

    summary.mentions_found = len(mentioned_questions)
    summary.coverage_rate = summary.mentions_found / max(1, summary.questions_analyzed)
    return summary


def estimate_topic_gaps(
    mention_rate: float,
    questions_analyzed: int,
    seed: str,
    gap_threshold: float = 20.0,
    topics: Optional[List[str]] = None,
) -> List[TopicGapEstimate]:
    """
    Estimate per-topic mention coverage for the content gaps view.

    Args:
        mention_rate: Overall per-run mention rate (0-1)
        questions_analyzed: Questions in the latest run, used to scale counts
        seed: Stable seed, normally the workspace id
        gap_threshold: Percentages below this are flagged as gaps

    Returns:
        Estimates sorted by percentage, highest first
    """
    rng = random.Random(seed)
    base_percentage = max(0.0, mention_rate) * 100

    estimates = []
    for name in topics or TOPIC_CATALOG:
        factor = rng.uniform(0.5, 1.5)
        percentage = round(min(100.0, base_percentage * factor), 1)
        estimates.append(
            TopicGapEstimate(
                name=name,
                mention_count=round(questions_analyzed * percentage / 100),
                mention_percentage=percentage,
                has_gap=percentage < gap_threshold,
                rank=0,
            )
        )

    estimates.sort(key=lambda t: (-t.mention_percentage, t.name))
    for index, estimate in enumerate(estimates, start=1):
        estimate.rank = index

    return estimates
