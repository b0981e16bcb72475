"""
MAX Visibility Service
Assembles the cumulative competitive visibility snapshot for a workspace

Reads go through a VisibilityRepository; everything after the reads is
pure computation, so the same stored runs always produce the same snapshot.
"""

import asyncio
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Awaitable, List, Optional
from uuid import UUID

from app.adapters.storage import (
    CompanyRecord, RepositoryError, RunRecord, VisibilityRepository, WorkspaceRecord
)
from app.config import Settings, get_settings
from app.schemas.visibility import (
    CompetitiveSnapshot, SnapshotStatus, VisibilityResult
)
from app.services.chart_builder import build_chart_data
from app.services.citation_normalizer import CitationNormalizer
from app.services.competitor_aggregator import aggregate_competitors
from app.services.cumulative_scorer import calculate_cumulative_scores
from app.services.ranker import (
    calculate_percentile, find_subject, rank_participants, select_smart_top
)
from app.services.response_summary import estimate_topic_gaps, summarize_responses
from app.services.trend_analyzer import analyze_score_trend

logger = logging.getLogger(__name__)

NO_DOMAIN_MESSAGE = "Please configure a domain for this workspace in settings."
NO_COMPANY_MESSAGE = "No company matches this workspace's domain yet."
NO_ASSESSMENT_MESSAGE = "Run your first scan to see your AI visibility."


class VisibilityService:
    """
    Builds CompetitiveSnapshot results.

    Failure policy:
    - Missing domain, company or completed runs are result states, not errors.
    - A RepositoryError on a secondary read (competitors, citations) empties
      that section and is listed in `degraded_sections`.
    - A RepositoryError on a primary read (workspace, company, runs,
      questions, responses) propagates.
    """

    def __init__(self, repository: VisibilityRepository, settings: Optional[Settings] = None):
        self.repository = repository
        self.settings = settings or get_settings()
        self.normalizer = CitationNormalizer(
            favicon_url_template=self.settings.FAVICON_URL_TEMPLATE,
            quote_length=self.settings.MENTION_QUOTE_LENGTH,
        )

    async def get_snapshot(self, workspace_id: UUID, now: Optional[datetime] = None) -> VisibilityResult:
        """
        Compute the visibility snapshot for a workspace.

        Args:
            workspace_id: Workspace to summarize
            now: Anchor for the chart window (defaults to current UTC time)

        Returns:
            VisibilityResult with a status and, when available, the snapshot

        Raises:
            RepositoryError: If a primary read fails
        """
        now = now or datetime.utcnow()

        workspace = await self.repository.get_workspace(workspace_id)
        if workspace is None or not workspace.domain:
            logger.info(f"Workspace {workspace_id} has no domain configured")
            return VisibilityResult(status=SnapshotStatus.NO_DOMAIN, message=NO_DOMAIN_MESSAGE)

        company = await self.repository.get_company_by_domain(workspace.domain)
        if company is None:
            logger.info(f"No company found for domain {workspace.domain}")
            return VisibilityResult(status=SnapshotStatus.NO_COMPANY, message=NO_COMPANY_MESSAGE)

        runs = await self.repository.list_completed_runs(workspace_id)
        if not runs:
            logger.info(f"No completed assessments for workspace {workspace_id}")
            return VisibilityResult(
                status=SnapshotStatus.NO_ASSESSMENT,
                message=NO_ASSESSMENT_MESSAGE,
                data=CompetitiveSnapshot(),
            )

        snapshot = await self._build_snapshot(workspace, company, runs, now)
        logger.info(
            f"Built visibility snapshot for workspace {workspace_id}: "
            f"{len(runs)} runs, rank {snapshot.competitive.current_rank}, "
            f"SOV {snapshot.competitive.share_of_voice}"
        )
        return VisibilityResult(status=SnapshotStatus.READY, data=snapshot)

    async def _read_secondary(self, section: str, read: Awaitable[List[Any]], degraded: List[str]) -> List[Any]:
        try:
            return await read
        except RepositoryError as e:
            logger.warning(f"Degrading '{section}' section after failed read: {e}")
            degraded.append(section)
            return []

    async def _build_snapshot(
        self,
        workspace: WorkspaceRecord,
        company: CompanyRecord,
        runs: List[RunRecord],
        now: datetime,
    ) -> CompetitiveSnapshot:
        settings = self.settings
        latest = runs[-1]
        run_ids = [run.id for run in runs]
        degraded: List[str] = []

        questions, competitor_rows = await asyncio.gather(
            self.repository.list_questions(latest.id),
            self._read_secondary("competitive", self.repository.list_competitors(run_ids), degraded),
        )

        question_ids = [q.id for q in questions]
        responses, citation_rows = await asyncio.gather(
            self.repository.list_responses(question_ids),
            self._read_secondary("citations", self.repository.list_citations(question_ids), degraded),
        )

        # Competitive picture across every completed run
        competitors = aggregate_competitors(competitor_rows)
        cumulative = calculate_cumulative_scores(runs, competitors)
        ranked = rank_participants(
            subject_name=company.company_name,
            subject_domain=workspace.domain,
            subject_score=cumulative.user_cumulative_mention_score,
            competitors=competitors,
            subject_visibility_score=latest.total_score,
            subject_assessment_count=len(runs),
        )
        subject = find_subject(ranked)
        current_rank = subject.rank if subject else 0
        top_competitors = select_smart_top(ranked, settings.TOP_COMPETITORS_LIMIT)

        # Latest run detail
        feed = self.normalizer.build_feed(citation_rows, responses, settings.RECENT_MENTIONS_LIMIT)
        summary = summarize_responses(questions, responses)
        topics = estimate_topic_gaps(
            mention_rate=latest.per_run_mention_rate,
            questions_analyzed=summary.questions_analyzed,
            seed=str(workspace.id),
            gap_threshold=settings.TOPIC_GAP_THRESHOLD,
        )
        trend = analyze_score_trend(runs)
        chart = build_chart_data(runs, now=now, window_days=settings.CHART_WINDOW_DAYS)

        share_of_voice = round(cumulative.cumulative_share_of_voice, 2)
        total_market = round(cumulative.total_cumulative_mentions, 4)

        return CompetitiveSnapshot.model_validate({
            "score": {
                "overall_score": min(1.0, max(0.0, latest.total_score / 100)),
                "trend_period": settings.TREND_PERIOD_LABEL,
                "trend_change": trend.trend_change,
                "trend_direction": trend.trend_direction,
                "mention_rate": latest.per_run_mention_rate,
                "sentiment_score": latest.sentiment_score,
                "citation_score": latest.citation_score,
                "competitive_score": latest.competitive_score,
            },
            "citations": {
                "direct_count": feed.direct_count,
                "indirect_count": feed.indirect_count,
                "total_count": feed.total_count,
                "coverage_rate": summary.coverage_rate,
                "all_mentions": [asdict(m) for m in feed.all_mentions],
                "recent_mentions": [asdict(m) for m in feed.recent_mentions],
            },
            "competitive": {
                "current_rank": current_rank,
                "total_competitors": len(competitors),
                "competitors": [asdict(p) for p in ranked],
                "top10_competitors": [asdict(p) for p in top_competitors],
                "percentile": calculate_percentile(current_rank, len(ranked)),
                "share_of_voice": share_of_voice,
                "total_market_mentions": total_market,
            },
            "topics": [asdict(t) for t in topics],
            "chartData": [asdict(p) for p in chart],
            "cumulative_data": {
                "total_assessments": cumulative.total_assessments,
                "user_cumulative_mentions": round(cumulative.user_cumulative_mention_score, 4),
                "total_market_mentions": total_market,
                "cumulative_share_of_voice": share_of_voice,
            },
            "summary": asdict(summary),
            "assessment_id": latest.id,
            "last_updated": latest.updated_at or latest.created_at,
            "degraded_sections": sorted(degraded),
        })
