"""Runs the Analysis and Feedback agents concurrently."""

import logging
from dataclasses import dataclass
from typing import Any

from config import settings
from models.schemas.agents import AnalysisResult, FeedbackResult
from services.llm_client import LLMClient
from services.provider_profiles import AgentProfile, AgentRole
from services.resilience import RetryPolicy, gather_or_cancel, run_with_retry, with_timeout

logger = logging.getLogger(__name__)


@dataclass
class AgentExecutorResult:
    analysis_result: AnalysisResult
    feedback_result: FeedbackResult


async def _run_agent(
    client: LLMClient,
    role: AgentRole,
    context: Any,
    timeout_ms: int,
    retry_policy: RetryPolicy,
):
    prompt = role.build_prompt(context)

    def attempt():
        return with_timeout(
            client.generate_structured(
                schema=role.schema,
                system_prompt=role.system_prompt,
                prompt=prompt,
                temperature=role.temperature,
            ),
            timeout_ms,
            role.name,
        )

    raw = await run_with_retry(attempt, role.name, retry_policy)
    return role.normalize(raw, context)


async def execute_agents(
    client: LLMClient,
    profile: AgentProfile,
    context: Any,
    timeout_ms: int | None = None,
    retry_policy: RetryPolicy | None = None,
) -> AgentExecutorResult:
    """Run both agents; if either fails the other is cancelled and the error propagates.

    Each attempt gets its own deadline, and retries apply per agent.
    """
    timeout_ms = timeout_ms or settings.agent_timeout_ms
    retry_policy = retry_policy or RetryPolicy.from_settings()

    analysis_result, feedback_result = await gather_or_cancel(
        _run_agent(client, profile.analysis, context, timeout_ms, retry_policy),
        _run_agent(client, profile.feedback, context, timeout_ms, retry_policy),
    )

    logger.info(
        "Agents finished: analysis proposed %.0f, feedback gave %d suggestions",
        analysis_result.final_score, len(feedback_result.suggestions),
    )
    return AgentExecutorResult(analysis_result=analysis_result, feedback_result=feedback_result)
