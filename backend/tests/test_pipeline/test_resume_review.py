"""Tests for the multi-agent resume review pipeline."""

import pytest

from models.schemas.agents import AnalysisResult, FeedbackResult
from models.schemas.local import (
    LocalActionVerbAnalysis,
    LocalAnalysisAgent,
    LocalFeedbackAgent,
    LocalKeywordExtraction,
)
from models.schemas.progress import ProgressStatus
from models.schemas.semantic import ActionVerbAnalysis, SemanticKeywordExtraction, StrongVerb
from services.errors import AIUnavailableError, AnalysisFailedError, LLMProviderError
from services.pipeline.resume_review import multi_agent_resume_review
from services.progress import ProgressStream
from services.resilience import RetryPolicy

# No signals at all: baseline 24, variance 7, allowed range 17-31
PLAIN_RESUME = "Engineer at Acme"

NO_RETRY = RetryPolicy(max_attempts=0)


def _cloud_responses(final_score=28, overrides=None):
    responses = {
        SemanticKeywordExtraction: SemanticKeywordExtraction(),
        ActionVerbAnalysis: ActionVerbAnalysis(),
        AnalysisResult: AnalysisResult(final_score=final_score),
        FeedbackResult: FeedbackResult(
            strengths=["Clear job title"],
            weaknesses=["No metrics"],
            suggestions=["Quantify results"],
        ),
    }
    responses.update(overrides or {})
    return responses


async def _review(client, provider="openai", progress=None, **kwargs):
    kwargs.setdefault("retry_policy", NO_RETRY)
    return await multi_agent_resume_review(
        PLAIN_RESUME, provider, "test-model", progress, client=client, **kwargs
    )


@pytest.mark.asyncio
async def test_score_within_range_is_kept(fake_llm):
    result = await _review(fake_llm(_cloud_responses(final_score=28)))

    assert result.baseline_score.score == 24
    assert result.allowed_variance == 7
    assert result.analysis.score == 28
    assert result.warnings == []
    assert result.analysis.summary.startswith("This resume scores 28/100, which is below average.")
    assert result.analysis.strengths == ["Clear job title"]
    assert len(result.analysis.detailed_analysis) == 4


@pytest.mark.asyncio
async def test_score_outside_range_is_clamped(fake_llm):
    result = await _review(fake_llm(_cloud_responses(final_score=60)))

    assert result.analysis.score == 31
    assert result.agent_insights.analysis.final_score == 60
    assert result.warnings == ["Score adjusted from 60 to 31 (outside allowed variance)"]


@pytest.mark.asyncio
async def test_signals_feed_the_baseline(fake_llm):
    client = fake_llm(_cloud_responses(
        final_score=30,
        overrides={
            SemanticKeywordExtraction: SemanticKeywordExtraction(technical_skills=["Python", "Go"], total_count=5),
            ActionVerbAnalysis: ActionVerbAnalysis(strong_verbs=[StrongVerb(verb="Led"), StrongVerb(verb="Built")]),
        },
    ))
    result = await _review(client)

    breakdown = result.baseline_score.breakdown
    assert breakdown["keywords"] == 8
    assert breakdown["action_verbs"] == 2
    assert result.baseline_score.score == 34


@pytest.mark.asyncio
async def test_progress_sequence(fake_llm):
    events = []
    await _review(fake_llm(_cloud_responses()), progress=ProgressStream(events.append))

    assert [(e.step, e.status.value) for e in events] == [
        ("tool-extraction", "started"),
        ("tool-extraction", "completed"),
        ("analysis-agent", "started"),
        ("feedback-agent", "started"),
        ("analysis-agent", "completed"),
        ("feedback-agent", "completed"),
        ("validation", "started"),
        ("validation", "completed"),
        ("complete", "completed"),
    ]


@pytest.mark.asyncio
async def test_extraction_failure_aborts_before_agents(fake_llm):
    events = []
    client = fake_llm(_cloud_responses(overrides={SemanticKeywordExtraction: LLMProviderError("down")}))

    with pytest.raises(AIUnavailableError) as exc_info:
        await _review(client, progress=ProgressStream(events.append))

    assert str(exc_info.value) == "AI unavailable for resume analysis. Please try again later."
    assert exc_info.value.timed_out is False
    assert AnalysisResult not in client.schemas_called()
    warning = events[-1]
    assert warning.status == ProgressStatus.WARNING
    assert warning.step == "tool-extraction"
    assert warning.agent_number == 0


@pytest.mark.asyncio
async def test_extraction_timeout(fake_llm):
    client = fake_llm(_cloud_responses(), delays={ActionVerbAnalysis: 5})

    with pytest.raises(AIUnavailableError) as exc_info:
        await _review(client, semantic_timeout_ms=20)

    assert exc_info.value.timed_out is True
    assert ActionVerbAnalysis in client.cancelled


@pytest.mark.asyncio
async def test_agent_timeout(fake_llm):
    client = fake_llm(_cloud_responses(), delays={AnalysisResult: 5})

    with pytest.raises(AnalysisFailedError) as exc_info:
        await _review(client, agent_timeout_ms=20)

    assert exc_info.value.timed_out is True
    assert str(exc_info.value) == "Resume review timed out. The AI model may be overloaded. Please try again."


@pytest.mark.asyncio
async def test_agent_failure(fake_llm):
    events = []
    client = fake_llm(_cloud_responses(overrides={FeedbackResult: LLMProviderError("bad json")}))

    with pytest.raises(AnalysisFailedError) as exc_info:
        await _review(client, progress=ProgressStream(events.append))

    assert exc_info.value.timed_out is False
    assert "timed out" not in str(exc_info.value)
    assert str(exc_info.value).startswith("Resume review failed: Feedback Agent failed after 1 attempts")
    assert events[-1].status == ProgressStatus.WARNING
    assert events[-1].step == "analysis-agent"


@pytest.mark.asyncio
async def test_local_provider_uses_simplified_schemas(fake_llm):
    client = fake_llm({
        LocalKeywordExtraction: LocalKeywordExtraction(),
        LocalActionVerbAnalysis: LocalActionVerbAnalysis(strong_verbs=["Led", "Built"]),
        LocalAnalysisAgent: LocalAnalysisAgent(final_score=28, score_explanation="Few signals"),
        LocalFeedbackAgent: LocalFeedbackAgent(strengths=["Concise"], summary="Short resume"),
    })

    result = await _review(client, provider="ollama")

    assert result.analysis.score == 28
    assert result.agent_insights.analysis.data_insights.verb_count == 2
    assert result.agent_insights.feedback.synthesis_notes == "Short resume"
    assert AnalysisResult not in client.schemas_called()
