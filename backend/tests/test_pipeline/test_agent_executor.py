"""Tests for concurrent agent execution."""

import pytest

from models.schemas.agents import AnalysisResult, FeedbackResult
from models.schemas.local import LocalAnalysisAgent, LocalFeedbackAgent
from models.schemas.scoring import BaselineScore
from models.schemas.tool_data import ToolDataResume, VerbList
from services.errors import LLMProviderError, RetryExhaustedError
from services.pipeline.agent_executor import execute_agents
from services.prompt_builder import ResumeAgentContext
from services.provider_profiles import resolve_agent_profile
from services.resilience import RetryPolicy
from services.scoring import ScoreDomain

NO_RETRY = RetryPolicy(max_attempts=0)


@pytest.fixture
def context():
    return ResumeAgentContext(
        resume_text="Senior engineer who led a team of 4 and cut costs by 20%",
        tool_data=ToolDataResume(action_verbs=VerbList(verbs=["Led", "Cut", "Built"], count=3)),
        baseline=BaselineScore(score=50, breakdown={"keywords": 10}),
        min_score=38,
        max_score=62,
    )


@pytest.mark.asyncio
async def test_runs_both_agents(fake_llm, context):
    client = fake_llm({
        AnalysisResult: AnalysisResult(final_score=55),
        FeedbackResult: FeedbackResult(strengths=["Clear impact"], suggestions=["Add metrics"]),
    })
    profile = resolve_agent_profile("openai", ScoreDomain.RESUME)

    result = await execute_agents(client, profile, context, timeout_ms=1000, retry_policy=NO_RETRY)

    assert result.analysis_result.final_score == 55
    assert result.feedback_result.strengths == ["Clear impact"]
    assert sorted(s.__name__ for s in client.schemas_called()) == ["AnalysisResult", "FeedbackResult"]


@pytest.mark.asyncio
async def test_prompts_carry_baseline_and_range(fake_llm, context):
    client = fake_llm({AnalysisResult: AnalysisResult(), FeedbackResult: FeedbackResult()})
    profile = resolve_agent_profile("gemini", ScoreDomain.RESUME)

    await execute_agents(client, profile, context, timeout_ms=1000, retry_policy=NO_RETRY)

    analysis_call = next(c for c in client.calls if c["schema"] is AnalysisResult)
    assert "BASELINE SCORE: 50/100" in analysis_call["prompt"]
    assert "ALLOWED RANGE: 38-62" in analysis_call["prompt"]


@pytest.mark.asyncio
async def test_local_results_are_normalized(fake_llm, context):
    client = fake_llm({
        LocalAnalysisAgent: LocalAnalysisAgent(final_score=52, keyword_count=7),
        LocalFeedbackAgent: LocalFeedbackAgent(strengths=["a", "b", "c", "d"], summary="Good"),
    })
    profile = resolve_agent_profile("ollama", ScoreDomain.RESUME)

    result = await execute_agents(client, profile, context, timeout_ms=1000, retry_policy=NO_RETRY)

    assert isinstance(result.analysis_result, AnalysisResult)
    assert result.analysis_result.data_insights.verb_count == 3
    assert result.analysis_result.data_insights.keyword_count == 7
    assert isinstance(result.feedback_result, FeedbackResult)
    assert result.feedback_result.strengths == ["a", "b", "c"]
    assert result.feedback_result.synthesis_notes == "Good"


@pytest.mark.asyncio
async def test_failure_cancels_sibling(fake_llm, context):
    client = fake_llm(
        {AnalysisResult: LLMProviderError("bad json"), FeedbackResult: FeedbackResult()},
        delays={FeedbackResult: 5},
    )
    profile = resolve_agent_profile("openai", ScoreDomain.RESUME)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await execute_agents(client, profile, context, timeout_ms=10_000, retry_policy=NO_RETRY)

    assert str(exc_info.value) == "Analysis Agent failed after 1 attempts: bad json"
    assert client.cancelled == [FeedbackResult]


@pytest.mark.asyncio
async def test_timeout_is_reported_as_timeout(fake_llm, context):
    client = fake_llm(
        {AnalysisResult: AnalysisResult(), FeedbackResult: FeedbackResult()},
        delays={FeedbackResult: 5},
    )
    profile = resolve_agent_profile("openai", ScoreDomain.RESUME)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await execute_agents(client, profile, context, timeout_ms=20, retry_policy=NO_RETRY)

    assert exc_info.value.timed_out is True
    assert "Feedback Agent timed out after 20ms" in str(exc_info.value)


@pytest.mark.asyncio
async def test_retries_a_flaky_agent(fake_llm, context):
    client = fake_llm({
        AnalysisResult: [LLMProviderError("flaky"), AnalysisResult(final_score=48)],
        FeedbackResult: FeedbackResult(),
    })
    profile = resolve_agent_profile("openai", ScoreDomain.RESUME)

    result = await execute_agents(
        client, profile, context, timeout_ms=1000,
        retry_policy=RetryPolicy(max_attempts=1, base_delay_ms=0),
    )

    assert result.analysis_result.final_score == 48
    assert client.schemas_called().count(AnalysisResult) == 2
