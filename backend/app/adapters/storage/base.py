"""
Base Visibility Repository Interface
Read-only access to assessment runs and everything they produced
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from uuid import UUID


@dataclass
class WorkspaceRecord:
    """Workspace with the domain used to resolve its subject company"""
    id: UUID
    name: str
    domain: Optional[str] = None


@dataclass
class CompanyRecord:
    """Subject company resolved from a workspace domain"""
    id: UUID
    company_name: str
    root_url: str


@dataclass
class RunRecord:
    """A completed assessment run"""
    id: UUID
    workspace_id: UUID
    company_id: UUID
    status: str
    created_at: datetime
    total_score: float = 0.0
    per_run_mention_rate: float = 0.0
    sentiment_score: float = 0.0
    citation_score: float = 0.0
    competitive_score: float = 0.0
    updated_at: Optional[datetime] = None


@dataclass
class QuestionRecord:
    id: UUID
    run_id: UUID
    question: str
    question_type: Optional[str] = None
    position: int = 0


@dataclass
class ResponseRecord:
    id: UUID
    question_id: UUID
    created_at: datetime
    full_response: str = ""
    mention_detected: bool = False
    mention_position: Optional[str] = None
    mention_sentiment: Optional[str] = None
    mention_context: Optional[str] = None
    question: str = ""


@dataclass
class CitationRow:
    """Citation joined with its response and question"""
    id: UUID
    response_id: UUID
    question_id: UUID
    question: str
    citation_url: str
    created_at: datetime
    bucket: str = "earned"
    citation_title: Optional[str] = None
    citation_domain: Optional[str] = None
    citation_excerpt: Optional[str] = None
    influence_score: float = 0.0
    position_in_citations: Optional[int] = None
    relevance_score: float = 0.0
    full_response: str = ""
    mention_context: Optional[str] = None


@dataclass
class CompetitorRow:
    """Competitor detected during a single run"""
    id: UUID
    run_id: UUID
    competitor_name: str
    competitor_domain: Optional[str] = None
    ai_visibility_score: float = 0.0
    per_run_mention_rate: float = 0.0
    rank_position: Optional[int] = None


class VisibilityRepository(ABC):
    """
    Abstract read-only repository over assessment data.

    Implementations return fully populated records: nullable numeric
    columns are resolved to 0.0 at this boundary so the aggregation code
    never has to deal with missing values.
    """

    @abstractmethod
    async def get_workspace(self, workspace_id: UUID) -> Optional[WorkspaceRecord]:
        pass

    @abstractmethod
    async def get_company_by_domain(self, domain: str) -> Optional[CompanyRecord]:
        pass

    @abstractmethod
    async def list_completed_runs(self, workspace_id: UUID) -> List[RunRecord]:
        """
        List completed runs for a workspace, oldest first.

        Filtering is by workspace, never by company, so sibling
        workspaces tracking the same company never leak into each other.
        """
        pass

    @abstractmethod
    async def list_questions(self, run_id: UUID) -> List[QuestionRecord]:
        pass

    @abstractmethod
    async def list_responses(self, question_ids: Sequence[UUID]) -> List[ResponseRecord]:
        pass

    @abstractmethod
    async def list_citations(self, question_ids: Sequence[UUID]) -> List[CitationRow]:
        pass

    @abstractmethod
    async def list_competitors(self, run_ids: Sequence[UUID]) -> List[CompetitorRow]:
        """
        List competitor rows for the given runs.

        Rows are ordered by run creation time, then competitor name, then
        row id; aggregation tie-breaks rely on this order.
        """
        pass


class RepositoryError(Exception):
    """Raised when the underlying data access fails (connectivity, auth, bad query)"""
    def __init__(self, message: str, operation: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.operation = operation
        self.details = details or {}
