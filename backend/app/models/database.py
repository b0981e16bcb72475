"""
Split Visibility Database Models
PostgreSQL with SQLAlchemy ORM

The assessment pipeline writes these tables; the visibility service only reads them.
"""

from datetime import datetime
from enum import Enum as PyEnum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime,
    ForeignKey, Enum, Index, Uuid
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class AssessmentStatus(str, PyEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class CitationBucket(str, PyEnum):
    OWNED = "owned"            # The subject's own site
    OPERATED = "operated"      # Profiles the subject controls (socials, listings)
    EARNED = "earned"          # Third-party coverage
    COMPETITOR = "competitor"  # A competitor's site


# ============================================================================
# WORKSPACE & COMPANY
# ============================================================================

class Workspace(Base):
    """Tenant boundary; every assessment run belongs to one workspace"""
    __tablename__ = "workspaces"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    domain = Column(String(255))  # Resolves the subject company

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    runs = relationship("AssessmentRun", back_populates="workspace", cascade="all, delete-orphan")


class Company(Base):
    """Subject company tracked by a workspace"""
    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_name = Column(String(255), nullable=False)
    root_url = Column(String(255), nullable=False, unique=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    runs = relationship("AssessmentRun", back_populates="company")


# ============================================================================
# ASSESSMENT RUNS
# ============================================================================

class AssessmentRun(Base):
    """One execution of the AI visibility test battery"""
    __tablename__ = "assessment_runs"

    id = Column(Uuid, primary_key=True, default=uuid4)
    workspace_id = Column(Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    company_id = Column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)

    status = Column(Enum(AssessmentStatus), default=AssessmentStatus.PENDING, nullable=False)

    # Scores (0-100 unless noted)
    total_score = Column(Float)
    mention_rate = Column(Float)  # Per-run fraction of questions mentioning the subject
    sentiment_score = Column(Float)
    citation_score = Column(Float)
    competitive_score = Column(Float)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    workspace = relationship("Workspace", back_populates="runs")
    company = relationship("Company", back_populates="runs")
    questions = relationship("Question", back_populates="run", cascade="all, delete-orphan")
    competitors = relationship("CompetitorRecord", back_populates="run", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_assessment_workspace_status', 'workspace_id', 'status'),
        Index('idx_assessment_created', 'workspace_id', 'created_at'),
    )


class Question(Base):
    """A question asked to the AI engine during a run"""
    __tablename__ = "questions"

    id = Column(Uuid, primary_key=True, default=uuid4)
    run_id = Column(Uuid, ForeignKey("assessment_runs.id", ondelete="CASCADE"), nullable=False)
    question = Column(Text, nullable=False)
    question_type = Column(String(50))
    position = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    run = relationship("AssessmentRun", back_populates="questions")
    responses = relationship("Response", back_populates="question", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_question_run', 'run_id'),
    )


class Response(Base):
    """AI engine answer to a question, with mention detection results"""
    __tablename__ = "responses"

    id = Column(Uuid, primary_key=True, default=uuid4)
    question_id = Column(Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)

    full_response = Column(Text, nullable=False, default="")

    # Mention detection
    mention_detected = Column(Boolean, default=False, nullable=False)
    mention_position = Column(String(20))  # "primary", "secondary", ...
    mention_sentiment = Column(String(20))
    mention_context = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    question = relationship("Question", back_populates="responses")
    citations = relationship("Citation", back_populates="response", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_response_question', 'question_id'),
    )


class Citation(Base):
    """A source the AI answer referenced"""
    __tablename__ = "citations"

    id = Column(Uuid, primary_key=True, default=uuid4)
    response_id = Column(Uuid, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False)

    citation_url = Column(Text, nullable=False)
    citation_title = Column(Text)
    citation_domain = Column(String(255))
    citation_excerpt = Column(Text)

    bucket = Column(String(20), default=CitationBucket.EARNED.value, nullable=False)
    influence_score = Column(Float)
    position_in_citations = Column(Integer)
    relevance_score = Column(Float)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    response = relationship("Response", back_populates="citations")

    __table_args__ = (
        Index('idx_citation_response', 'response_id'),
    )


class CompetitorRecord(Base):
    """Competitor detected during a single run"""
    __tablename__ = "competitor_records"

    id = Column(Uuid, primary_key=True, default=uuid4)
    run_id = Column(Uuid, ForeignKey("assessment_runs.id", ondelete="CASCADE"), nullable=False)

    # Free text; the same competitor can recur under the same name across runs
    competitor_name = Column(String(255), nullable=False)
    competitor_domain = Column(String(255))

    ai_visibility_score = Column(Float)
    mention_rate = Column(Float)  # Per-run fraction
    rank_position = Column(Integer)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    run = relationship("AssessmentRun", back_populates="competitors")

    __table_args__ = (
        Index('idx_competitor_run', 'run_id'),
    )
