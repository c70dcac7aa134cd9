"""Multi-agent resume review.

Flow:
    resume_text
      ├─ semantic keywords + action verbs (LLM, concurrent, deadline each)
      ├─ quantified achievements + formatting (deterministic)
      │       ↓
      ├─ baseline score → allowed variance band
      │       ↓
      ├─ Analysis Agent ┐ (concurrent)
      ├─ Feedback Agent ┘
      │       ↓
      └─ clamp score into band → ResumeReviewResponse
"""

import logging

from config import settings
from models.responses import AgentInsights, CollaborativeResult, ResumeReviewResponse
from models.schemas.scoring import ResumeSignals
from models.schemas.tool_data import KeywordList, ToolDataResume, VerbList
from services import progress as steps
from services.errors import AIServiceError
from services.llm_client import LLMClient, get_llm_client
from services.pipeline.agent_executor import execute_agents
from services.pipeline.error_handler import handle_agent_error, handle_extraction_error
from services.pipeline.response_builder import build_resume_review_response
from services.progress import ProgressStream
from services.prompt_builder import ResumeAgentContext
from services.provider_profiles import resolve_agent_profile, resolve_extraction_profile
from services.resilience import RetryPolicy, gather_or_cancel, with_timeout
from services.scoring import (
    ScoreDomain,
    calculate_allowed_variance,
    calculate_resume_score,
    round_half_up,
    score_bounds,
    validate_score,
)
from services.semantic_extraction import (
    analyze_action_verbs,
    extract_semantic_keywords,
    keyword_count,
    verb_count,
)
from services.signals import analyze_formatting, count_quantified_achievements

logger = logging.getLogger(__name__)


async def _gather_tool_data(client, extraction, resume_text: str, timeout_ms: int) -> ToolDataResume:
    keywords, verbs = await gather_or_cancel(
        with_timeout(
            extract_semantic_keywords(client, extraction, resume_text),
            timeout_ms,
            "extract_semantic_keywords",
        ),
        with_timeout(
            analyze_action_verbs(client, extraction, resume_text),
            timeout_ms,
            "analyze_action_verbs",
        ),
    )
    return ToolDataResume(
        quantified_achievements=count_quantified_achievements(resume_text),
        keywords=KeywordList(
            keywords=keywords.technical_skills + keywords.tools_platforms + keywords.methodologies,
            count=keyword_count(keywords),
        ),
        action_verbs=VerbList(
            verbs=[v.verb for v in verbs.strong_verbs],
            count=verb_count(verbs),
        ),
        formatting=analyze_formatting(resume_text),
    )


async def multi_agent_resume_review(
    resume_text: str,
    provider: str,
    model_name: str,
    progress: ProgressStream | None = None,
    *,
    client: LLMClient | None = None,
    semantic_timeout_ms: int | None = None,
    agent_timeout_ms: int | None = None,
    retry_policy: RetryPolicy | None = None,
) -> CollaborativeResult[ResumeReviewResponse]:
    """Score and critique a preprocessed resume.

    Raises ``AIUnavailableError`` if semantic extraction fails and
    ``AnalysisFailedError`` if either agent fails.
    """
    progress = progress or ProgressStream()
    client = client or get_llm_client(provider, model_name)
    extraction = resolve_extraction_profile(provider)
    agents = resolve_agent_profile(provider, ScoreDomain.RESUME)

    # --- Stage 1: Tool extraction ---
    progress.send_started(steps.TOOL_EXTRACTION, agent_number=0)
    try:
        tool_data = await _gather_tool_data(
            client, extraction, resume_text, semantic_timeout_ms or settings.semantic_timeout_ms
        )
    except AIServiceError as e:
        handle_extraction_error(e, progress, ScoreDomain.RESUME)
    progress.send_completed(steps.TOOL_EXTRACTION, agent_number=0)

    # --- Stage 2: Baseline and allowed band ---
    baseline = calculate_resume_score(ResumeSignals(
        quantified_count=tool_data.quantified_achievements.count,
        keyword_count=tool_data.keywords.count,
        verb_count=tool_data.action_verbs.count,
        has_bullet_points=tool_data.formatting.has_bullet_points,
        section_count=tool_data.formatting.section_count,
    ))
    variance = calculate_allowed_variance(baseline.score, ScoreDomain.RESUME)
    min_score, max_score = score_bounds(baseline.score, variance)
    logger.info(
        "Resume review baseline: %d, allowed variance: ±%d (%d-%d)",
        baseline.score, variance, min_score, max_score,
    )

    # --- Stage 3: Agents ---
    context = ResumeAgentContext(
        resume_text=resume_text,
        tool_data=tool_data,
        baseline=baseline,
        min_score=min_score,
        max_score=max_score,
    )
    progress.send_started(steps.ANALYSIS_AGENT, agent_number=1)
    progress.send_started(steps.FEEDBACK_AGENT, agent_number=2)
    try:
        result = await execute_agents(client, agents, context, agent_timeout_ms, retry_policy)
    except Exception as e:
        handle_agent_error(e, progress, ScoreDomain.RESUME)
    progress.send_completed(steps.ANALYSIS_AGENT, agent_number=1)
    progress.send_completed(steps.FEEDBACK_AGENT, agent_number=2)

    # --- Stage 4: Validation ---
    progress.send_started(steps.VALIDATION)
    proposed = result.analysis_result.final_score
    validated = validate_score(proposed, baseline.score, variance)
    warnings: list[str] = []
    if validated != round_half_up(proposed):
        warnings.append(f"Score adjusted from {proposed:g} to {validated} (outside allowed variance)")
    progress.send_completed(steps.VALIDATION)

    response = build_resume_review_response(validated, baseline, tool_data, result.feedback_result)
    progress.send_completed(steps.COMPLETE)

    return CollaborativeResult[ResumeReviewResponse](
        analysis=response,
        agent_insights=AgentInsights(analysis=result.analysis_result, feedback=result.feedback_result),
        baseline_score=baseline,
        allowed_variance=variance,
        warnings=warnings,
    )
