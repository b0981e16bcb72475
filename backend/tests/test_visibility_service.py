"""Tests for the visibility snapshot service."""

from datetime import timedelta
from uuid import uuid4

import pytest

from app.adapters.storage import RepositoryError, WorkspaceRecord
from app.schemas.visibility import CompetitiveSnapshot, SnapshotStatus
from app.services.visibility_service import (
    NO_ASSESSMENT_MESSAGE,
    NO_COMPANY_MESSAGE,
    NO_DOMAIN_MESSAGE,
    VisibilityService,
)
from tests.factories import (
    NOW,
    WORKSPACE_ID,
    make_citation,
    make_competitor,
    make_question,
    make_repository,
    make_response,
    make_run,
)


def single_run_repository(**kwargs):
    run = make_run(mention_rate=0.4, total_score=62.0, created_at=NOW - timedelta(hours=2))
    questions = [make_question(run.id, f"Question {i}", position=i) for i in range(4)]
    responses = [
        make_response(questions[0], position="primary", created_at=run.created_at),
        make_response(questions[1], position="secondary", created_at=run.created_at),
        make_response(questions[2], mentioned=False, created_at=run.created_at),
        make_response(questions[3], mentioned=False, created_at=run.created_at),
    ]
    citations = [
        make_citation(responses[0], bucket="owned", created_at=run.created_at),
        make_citation(responses[1], bucket="earned", domain="g2.com", created_at=run.created_at),
    ]
    competitors = [
        make_competitor("A", 0.3, run.id),
        make_competitor("B", 0.9, run.id, domain="b.com"),
    ]
    return make_repository(
        runs=[run],
        questions=questions,
        responses=responses,
        citations=citations,
        competitors=competitors,
        **kwargs,
    )


@pytest.fixture
def service_for(settings):
    def build(repository):
        return VisibilityService(repository, settings=settings)
    return build


class TestEmptyStates:
    async def test_unknown_workspace_is_no_domain(self, service_for):
        result = await service_for(make_repository()).get_snapshot(uuid4(), now=NOW)

        assert result.status == SnapshotStatus.NO_DOMAIN
        assert result.message == NO_DOMAIN_MESSAGE
        assert result.data is None

    async def test_workspace_without_domain_is_no_domain(self, service_for):
        repository = make_repository(workspace=WorkspaceRecord(id=WORKSPACE_ID, name="Acme", domain=None))

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.status == SnapshotStatus.NO_DOMAIN
        assert "company" not in repository.calls

    async def test_unmatched_domain_is_no_company(self, service_for):
        repository = make_repository(company=None)

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.status == SnapshotStatus.NO_COMPANY
        assert result.message == NO_COMPANY_MESSAGE
        assert result.data is None

    async def test_zero_completed_runs_is_empty_snapshot(self, service_for):
        result = await service_for(make_repository()).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.status == SnapshotStatus.NO_ASSESSMENT
        assert result.message == NO_ASSESSMENT_MESSAGE
        assert result.data == CompetitiveSnapshot()
        assert result.data.citations.all_mentions == []
        assert result.data.competitive.competitors == []
        assert result.data.chart_data == []
        assert result.data.competitive.share_of_voice == 0.0

    async def test_runs_from_other_workspaces_are_not_counted(self, service_for):
        stray = make_run()
        stray.workspace_id = uuid4()

        result = await service_for(make_repository(runs=[stray])).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.status == SnapshotStatus.NO_ASSESSMENT


class TestReadySnapshot:
    async def test_single_run_competitive_picture(self, service_for):
        result = await service_for(single_run_repository()).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.status == SnapshotStatus.READY
        competitive = result.data.competitive
        assert [c.name for c in competitive.competitors] == ["B", "Acme Analytics", "A"]
        assert competitive.current_rank == 2
        assert competitive.total_competitors == 2
        assert competitive.share_of_voice == pytest.approx(25.0)
        assert competitive.total_market_mentions == pytest.approx(1.6)
        assert competitive.percentile == 67
        assert result.data.cumulative_data.total_assessments == 1
        assert result.data.cumulative_data.cumulative_share_of_voice == pytest.approx(25.0)

    async def test_latest_run_details(self, service_for):
        result = await service_for(single_run_repository()).get_snapshot(WORKSPACE_ID, now=NOW)
        data = result.data

        assert data.score.overall_score == pytest.approx(0.62)
        assert data.score.mention_rate == pytest.approx(0.4)
        assert data.score.trend_direction == "stable"
        assert data.citations.total_count == 2
        assert data.citations.direct_count == 1
        assert data.citations.indirect_count == 1
        assert data.citations.coverage_rate == pytest.approx(0.5)
        assert data.summary.questions_analyzed == 4
        assert data.summary.mentions_found == 2
        assert len(data.chart_data) == 1
        assert data.chart_data[0].time_label is None
        assert all(t.is_estimate for t in data.topics)
        assert data.degraded_sections == []

    async def test_second_run_accumulates_share_of_voice(self, service_for):
        repository = single_run_repository()
        second = make_run(mention_rate=0.2, total_score=58.0, created_at=NOW - timedelta(minutes=30))
        repository.runs.append(second)
        repository.competitors.append(make_competitor("A", 0.1, second.id))

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        cumulative = result.data.cumulative_data
        assert cumulative.total_assessments == 2
        assert cumulative.user_cumulative_mentions == pytest.approx(0.6)
        assert cumulative.total_market_mentions == pytest.approx(1.9)
        assert cumulative.cumulative_share_of_voice == pytest.approx(31.58)
        assert result.data.assessment_id == second.id
        assert result.data.score.trend_change == pytest.approx(-4.0)

        a = next(c for c in result.data.competitive.competitors if c.name == "A")
        assert a.cumulative_mention_score == pytest.approx(0.4)
        assert a.assessment_count == 2

    async def test_subject_outside_top_ten_is_appended(self, service_for):
        run = make_run(mention_rate=0.5)
        competitors = [make_competitor(f"Rival {i:02d}", 0.9 - i * 0.01, run.id) for i in range(14)]
        competitors += [make_competitor(f"Minor {i:02d}", 0.1, run.id) for i in range(6)]
        repository = make_repository(runs=[run], competitors=competitors)

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        top = result.data.competitive.top10_competitors
        assert result.data.competitive.current_rank == 15
        assert len(top) == 10
        assert top[-1].is_subject
        assert top[-1].rank == 15

    async def test_falls_back_to_responses_without_citations(self, service_for):
        run = make_run()
        questions = [make_question(run.id, f"Q{i}", position=i) for i in range(4)]
        responses = [make_response(q) for q in questions]
        repository = make_repository(runs=[run], questions=questions, responses=responses)

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        mentions = result.data.citations.all_mentions
        assert len(mentions) == 4
        assert all(m.favicon is None for m in mentions)
        assert len(result.data.citations.recent_mentions) == 4

    async def test_same_input_gives_same_snapshot(self, service_for):
        service = service_for(single_run_repository())

        first = await service.get_snapshot(WORKSPACE_ID, now=NOW)
        second = await service.get_snapshot(WORKSPACE_ID, now=NOW)

        assert first.model_dump(mode="json") == second.model_dump(mode="json")

    async def test_chart_data_serializes_under_camel_case_key(self, service_for):
        result = await service_for(single_run_repository()).get_snapshot(WORKSPACE_ID, now=NOW)

        dumped = result.data.model_dump(by_alias=True)
        assert "chartData" in dumped
        assert "chart_data" not in dumped


class TestPartialFailures:
    async def test_competitor_read_failure_degrades_competitive_section(self, service_for):
        repository = single_run_repository(fail={"competitors"})

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.status == SnapshotStatus.READY
        assert result.data.degraded_sections == ["competitive"]
        assert result.data.competitive.total_competitors == 0
        assert result.data.competitive.current_rank == 1
        assert result.data.citations.total_count == 2

    async def test_citation_read_failure_degrades_citations_section(self, service_for):
        repository = single_run_repository(fail={"citations"})

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.data.degraded_sections == ["citations"]
        assert result.data.competitive.total_competitors == 2

    async def test_both_secondary_failures_are_listed_sorted(self, service_for):
        repository = single_run_repository(fail={"competitors", "citations"})

        result = await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        assert result.data.degraded_sections == ["citations", "competitive"]

    @pytest.mark.parametrize("operation", ["workspace", "company", "runs", "questions", "responses"])
    async def test_primary_read_failure_propagates(self, service_for, operation):
        repository = single_run_repository(fail={operation})

        with pytest.raises(RepositoryError) as exc_info:
            await service_for(repository).get_snapshot(WORKSPACE_ID, now=NOW)

        assert exc_info.value.operation == operation
