"""
Database Seed Script
Creates a demo workspace with several completed assessments for development
"""

import asyncio
import sys
from datetime import datetime, timedelta
from uuid import uuid4
import random

# Add parent directory to path
sys.path.insert(0, str(__file__).rsplit("/", 2)[0])

from app.models import (
    AssessmentRun, AssessmentStatus, Citation, CitationBucket, Company,
    CompetitorRecord, Question, Response, Workspace
)
from app.utils.database import close_db, get_session_maker, init_db

DEMO_DOMAIN = "acme-analytics.com"

QUESTIONS = [
    "What is the best product analytics platform for startups?",
    "Which web analytics tool has the best pricing?",
    "Compare Acme Analytics vs Mixpanel for event tracking",
    "What analytics software integrates with Segment?",
    "Recommend a privacy-friendly analytics tool",
    "Which analytics platform has the best customer support?",
]

COMPETITORS = [
    ("Mixpanel", "mixpanel.com"),
    ("Amplitude", "amplitude.com"),
    ("Heap", "heap.io"),
    ("PostHog", "posthog.com"),
    ("Google Analytics", "analytics.google.com"),
]

CITATION_SOURCES = [
    ("acme-analytics.com", CitationBucket.OWNED),
    ("g2.com", CitationBucket.EARNED),
    ("techcrunch.com", CitationBucket.EARNED),
    ("mixpanel.com", CitationBucket.COMPETITOR),
    ("linkedin.com", CitationBucket.OPERATED),
]


def create_run(workspace: Workspace, company: Company, created_at: datetime, rng: random.Random):
    """Create one completed run with questions, responses, citations and competitors"""
    mention_rate = round(rng.uniform(0.2, 0.7), 2)
    run = AssessmentRun(
        id=uuid4(),
        workspace_id=workspace.id,
        company_id=company.id,
        status=AssessmentStatus.COMPLETED,
        total_score=round(mention_rate * 100 * rng.uniform(0.8, 1.1), 1),
        mention_rate=mention_rate,
        sentiment_score=round(rng.uniform(50, 90), 1),
        citation_score=round(rng.uniform(30, 80), 1),
        competitive_score=round(rng.uniform(30, 80), 1),
        created_at=created_at,
        updated_at=created_at,
    )

    for position, text in enumerate(QUESTIONS):
        question = Question(id=uuid4(), question=text, position=position, created_at=created_at)
        mentioned = rng.random() < mention_rate
        response = Response(
            id=uuid4(),
            full_response=f"Several tools stand out for this question. {company.company_name} "
                          f"and Mixpanel are frequently recommended for product teams.",
            mention_detected=mentioned,
            mention_position=rng.choice(["primary", "secondary"]) if mentioned else None,
            mention_sentiment=rng.choice(["positive", "neutral"]) if mentioned else None,
            mention_context=f"{company.company_name} is a strong choice for product teams." if mentioned else None,
            created_at=created_at,
        )
        for index, (domain, bucket) in enumerate(rng.sample(CITATION_SOURCES, 2)):
            response.citations.append(
                Citation(
                    id=uuid4(),
                    citation_url=f"https://{domain}/analytics",
                    citation_title=f"Analytics on {domain}",
                    citation_domain=domain,
                    bucket=bucket.value,
                    influence_score=round(rng.uniform(0.2, 1.0), 2),
                    position_in_citations=index + 1,
                    relevance_score=round(rng.uniform(0.2, 1.0), 2),
                    created_at=created_at,
                )
            )
        question.responses.append(response)
        run.questions.append(question)

    for rank, (name, domain) in enumerate(rng.sample(COMPETITORS, 4), start=1):
        run.competitors.append(
            CompetitorRecord(
                id=uuid4(),
                competitor_name=name,
                competitor_domain=domain,
                ai_visibility_score=round(rng.uniform(20, 90), 1),
                mention_rate=round(rng.uniform(0.1, 0.8), 2),
                rank_position=rank,
                created_at=created_at,
            )
        )

    return run


async def create_sample_data():
    """Create all sample data"""
    print("Creating sample data...")
    rng = random.Random(42)
    now = datetime.utcnow()

    async with get_session_maker()() as db:
        workspace = Workspace(id=uuid4(), name="Acme Analytics", domain=DEMO_DOMAIN)
        company = Company(id=uuid4(), company_name="Acme Analytics", root_url=DEMO_DOMAIN)
        db.add_all([workspace, company])
        await db.flush()
        print(f"  Created workspace: {workspace.id}")

        # Spread runs over the last three weeks, with two scans today
        offsets = [timedelta(days=20), timedelta(days=13), timedelta(days=6),
                   timedelta(hours=5), timedelta(hours=1)]
        for offset in offsets:
            db.add(create_run(workspace, company, now - offset, rng))
        print(f"  Created {len(offsets)} completed assessments")

        await db.commit()

    print("Sample data created successfully!")
    print(f"  GET /api/v1/visibility/{workspace.id}")


async def main():
    await init_db()
    try:
        await create_sample_data()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
