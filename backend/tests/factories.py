"""Record builders and an in-memory repository for visibility tests."""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set
from uuid import UUID, uuid4

from app.adapters.storage import (
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

NOW = datetime(2026, 10, 17, 20, 0, 0)
WORKSPACE_ID = UUID("11111111-1111-1111-1111-111111111111")
COMPANY_ID = UUID("22222222-2222-2222-2222-222222222222")


def make_run(
    mention_rate: float = 0.4,
    created_at: datetime = NOW,
    total_score: float = 60.0,
    run_id: Optional[UUID] = None,
) -> RunRecord:
    return RunRecord(
        id=run_id or uuid4(),
        workspace_id=WORKSPACE_ID,
        company_id=COMPANY_ID,
        status="completed",
        created_at=created_at,
        total_score=total_score,
        per_run_mention_rate=mention_rate,
        sentiment_score=70.0,
        citation_score=40.0,
        competitive_score=55.0,
    )


def make_competitor(
    name: str,
    mention_rate: float,
    run_id: UUID,
    score: float = 50.0,
    rank: Optional[int] = None,
    domain: Optional[str] = None,
) -> CompetitorRow:
    return CompetitorRow(
        id=uuid4(),
        run_id=run_id,
        competitor_name=name,
        competitor_domain=domain,
        ai_visibility_score=score,
        per_run_mention_rate=mention_rate,
        rank_position=rank,
    )


def make_question(run_id: UUID, text: str = "What is the best analytics tool?", position: int = 0) -> QuestionRecord:
    return QuestionRecord(id=uuid4(), run_id=run_id, question=text, position=position)


def make_response(
    question: QuestionRecord,
    mentioned: bool = True,
    position: Optional[str] = "primary",
    context: Optional[str] = None,
    full_response: str = "Acme Analytics is a popular choice for product teams.",
    created_at: datetime = NOW,
    sentiment: Optional[str] = "positive",
) -> ResponseRecord:
    return ResponseRecord(
        id=uuid4(),
        question_id=question.id,
        created_at=created_at,
        full_response=full_response,
        mention_detected=mentioned,
        mention_position=position if mentioned else None,
        mention_sentiment=sentiment if mentioned else None,
        mention_context=context,
        question=question.question,
    )


def make_citation(
    response: ResponseRecord,
    bucket: str = "owned",
    domain: Optional[str] = "acme-analytics.com",
    excerpt: Optional[str] = None,
    created_at: datetime = NOW,
) -> CitationRow:
    return CitationRow(
        id=uuid4(),
        response_id=response.id,
        question_id=response.question_id,
        question=response.question,
        citation_url=f"https://{domain or 'example.com'}/page",
        created_at=created_at,
        bucket=bucket,
        citation_domain=domain,
        citation_excerpt=excerpt,
        influence_score=0.5,
        full_response=response.full_response,
        mention_context=response.mention_context,
    )


class InMemoryVisibilityRepository(VisibilityRepository):
    """Repository over plain lists; `fail` names operations that raise RepositoryError"""

    def __init__(
        self,
        workspace: Optional[WorkspaceRecord] = None,
        company: Optional[CompanyRecord] = None,
        runs: Optional[List[RunRecord]] = None,
        questions: Optional[List[QuestionRecord]] = None,
        responses: Optional[List[ResponseRecord]] = None,
        citations: Optional[List[CitationRow]] = None,
        competitors: Optional[List[CompetitorRow]] = None,
        fail: Optional[Set[str]] = None,
    ):
        self.workspace = workspace
        self.company = company
        self.runs = runs or []
        self.questions = questions or []
        self.responses = responses or []
        self.citations = citations or []
        self.competitors = competitors or []
        self.fail = fail or set()
        self.calls: Dict[str, int] = {}

    def _record(self, operation: str):
        self.calls[operation] = self.calls.get(operation, 0) + 1
        if operation in self.fail:
            raise RepositoryError(f"Failed to read {operation}", operation=operation)

    async def get_workspace(self, workspace_id: UUID) -> Optional[WorkspaceRecord]:
        self._record("workspace")
        if self.workspace and self.workspace.id == workspace_id:
            return self.workspace
        return None

    async def get_company_by_domain(self, domain: str) -> Optional[CompanyRecord]:
        self._record("company")
        if self.company and self.company.root_url == domain:
            return self.company
        return None

    async def list_completed_runs(self, workspace_id: UUID) -> List[RunRecord]:
        self._record("runs")
        runs = [r for r in self.runs if r.workspace_id == workspace_id and r.status == "completed"]
        return sorted(runs, key=lambda r: r.created_at)

    async def list_questions(self, run_id: UUID) -> List[QuestionRecord]:
        self._record("questions")
        return [q for q in self.questions if q.run_id == run_id]

    async def list_responses(self, question_ids: Sequence[UUID]) -> List[ResponseRecord]:
        self._record("responses")
        return [r for r in self.responses if r.question_id in set(question_ids)]

    async def list_citations(self, question_ids: Sequence[UUID]) -> List[CitationRow]:
        self._record("citations")
        return [c for c in self.citations if c.question_id in set(question_ids)]

    async def list_competitors(self, run_ids: Sequence[UUID]) -> List[CompetitorRow]:
        self._record("competitors")
        return [c for c in self.competitors if c.run_id in set(run_ids)]


def make_repository(**kwargs) -> InMemoryVisibilityRepository:
    """Repository with the demo workspace and company already resolvable"""
    kwargs.setdefault("workspace", WorkspaceRecord(id=WORKSPACE_ID, name="Acme", domain="acme-analytics.com"))
    kwargs.setdefault("company", CompanyRecord(id=COMPANY_ID, company_name="Acme Analytics", root_url="acme-analytics.com"))
    return InMemoryVisibilityRepository(**kwargs)
