"""
SQLAlchemy Visibility Repository
Maps ORM rows into default-filled records for the aggregation services
"""

import logging
from typing import Any, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import (
    AssessmentRun, AssessmentStatus, Citation, Company, CompetitorRecord,
    Question, Response, Workspace
)
from .base import (
    CitationRow,
    CompanyRecord,
    CompetitorRow,
    QuestionRecord,
    RepositoryError,
    ResponseRecord,
    RunRecord,
    VisibilityRepository,
    WorkspaceRecord,
)

logger = logging.getLogger(__name__)


class SQLAlchemyVisibilityRepository(VisibilityRepository):
    """
    Visibility repository backed by async SQLAlchemy.

    Every read opens its own short-lived session so independent reads
    can be awaited concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def _fetch(self, operation: str, statement, scalars: bool = True) -> List[Any]:
        try:
            async with self.session_maker() as session:
                result = await session.execute(statement)
                return list(result.scalars().all() if scalars else result.all())
        except SQLAlchemyError as e:
            logger.error(f"Repository read failed during {operation}: {e}")
            raise RepositoryError(
                f"Failed to read {operation}",
                operation=operation,
                details={"error": str(e)},
            ) from e

    async def get_workspace(self, workspace_id: UUID) -> Optional[WorkspaceRecord]:
        rows = await self._fetch(
            "workspace",
            select(Workspace).where(Workspace.id == workspace_id)
        )
        if not rows:
            return None

        workspace = rows[0]
        return WorkspaceRecord(
            id=workspace.id,
            name=workspace.name,
            domain=workspace.domain or None,
        )

    async def get_company_by_domain(self, domain: str) -> Optional[CompanyRecord]:
        rows = await self._fetch(
            "company",
            select(Company).where(Company.root_url == domain)
        )
        if not rows:
            return None

        company = rows[0]
        return CompanyRecord(
            id=company.id,
            company_name=company.company_name,
            root_url=company.root_url,
        )

    async def list_completed_runs(self, workspace_id: UUID) -> List[RunRecord]:
        runs = await self._fetch(
            "runs",
            select(AssessmentRun)
            .where(
                AssessmentRun.workspace_id == workspace_id,
                AssessmentRun.status == AssessmentStatus.COMPLETED,
            )
            .order_by(AssessmentRun.created_at.asc(), AssessmentRun.id.asc())
        )

        return [
            RunRecord(
                id=run.id,
                workspace_id=run.workspace_id,
                company_id=run.company_id,
                status=run.status.value,
                created_at=run.created_at,
                total_score=run.total_score or 0.0,
                per_run_mention_rate=run.mention_rate or 0.0,
                sentiment_score=run.sentiment_score or 0.0,
                citation_score=run.citation_score or 0.0,
                competitive_score=run.competitive_score or 0.0,
                updated_at=run.updated_at,
            )
            for run in runs
        ]

    async def list_questions(self, run_id: UUID) -> List[QuestionRecord]:
        questions = await self._fetch(
            "questions",
            select(Question)
            .where(Question.run_id == run_id)
            .order_by(Question.position.asc(), Question.id.asc())
        )

        return [
            QuestionRecord(
                id=q.id,
                run_id=q.run_id,
                question=q.question,
                question_type=q.question_type,
                position=q.position or 0,
            )
            for q in questions
        ]

    async def list_responses(self, question_ids: Sequence[UUID]) -> List[ResponseRecord]:
        if not question_ids:
            return []

        rows = await self._fetch(
            "responses",
            select(Response, Question.question)
            .join(Question, Response.question_id == Question.id)
            .where(Response.question_id.in_(list(question_ids)))
            .order_by(Response.created_at.asc(), Response.id.asc()),
            scalars=False,
        )

        return [
            ResponseRecord(
                id=response.id,
                question_id=response.question_id,
                created_at=response.created_at,
                full_response=response.full_response or "",
                mention_detected=bool(response.mention_detected),
                mention_position=response.mention_position,
                mention_sentiment=response.mention_sentiment,
                mention_context=response.mention_context or None,
                question=question_text,
            )
            for response, question_text in rows
        ]

    async def list_citations(self, question_ids: Sequence[UUID]) -> List[CitationRow]:
        if not question_ids:
            return []

        rows = await self._fetch(
            "citations",
            select(Citation, Response, Question)
            .join(Response, Citation.response_id == Response.id)
            .join(Question, Response.question_id == Question.id)
            .where(Question.id.in_(list(question_ids)))
            .order_by(Citation.created_at.asc(), Citation.id.asc()),
            scalars=False,
        )

        return [
            CitationRow(
                id=citation.id,
                response_id=response.id,
                question_id=question.id,
                question=question.question,
                citation_url=citation.citation_url,
                created_at=citation.created_at,
                bucket=citation.bucket or "earned",
                citation_title=citation.citation_title,
                citation_domain=citation.citation_domain or None,
                citation_excerpt=citation.citation_excerpt or None,
                influence_score=citation.influence_score or 0.0,
                position_in_citations=citation.position_in_citations,
                relevance_score=citation.relevance_score or 0.0,
                full_response=response.full_response or "",
                mention_context=response.mention_context or None,
            )
            for citation, response, question in rows
        ]

    async def list_competitors(self, run_ids: Sequence[UUID]) -> List[CompetitorRow]:
        if not run_ids:
            return []

        competitors = await self._fetch(
            "competitors",
            select(CompetitorRecord)
            .join(AssessmentRun, CompetitorRecord.run_id == AssessmentRun.id)
            .where(CompetitorRecord.run_id.in_(list(run_ids)))
            .order_by(
                AssessmentRun.created_at.asc(),
                CompetitorRecord.competitor_name.asc(),
                CompetitorRecord.id.asc(),
            )
        )

        return [
            CompetitorRow(
                id=c.id,
                run_id=c.run_id,
                competitor_name=c.competitor_name,
                competitor_domain=c.competitor_domain or None,
                ai_visibility_score=c.ai_visibility_score or 0.0,
                per_run_mention_rate=c.mention_rate or 0.0,
                rank_position=c.rank_position,
            )
            for c in competitors
        ]
