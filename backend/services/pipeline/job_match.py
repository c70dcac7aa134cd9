"""Multi-agent job matching.

Flow:
    resume_text + job_text
      ├─ semantic skill match + similarity (LLM, concurrent, deadline each)
      │     └─ on failure: abort, or keyword overlap when the fallback is enabled
      ├─ years of experience (deterministic)
      │       ↓
      ├─ baseline match score → allowed variance band
      │       ↓
      ├─ Analysis Agent ┐ (concurrent)
      ├─ Feedback Agent ┘
      │       ↓
      └─ clamp score into band → JobMatchResponse
"""

import logging

from config import settings
from models.responses import AgentInsights, CollaborativeResult, JobMatchResponse
from models.schemas.scoring import JobMatchSignals
from models.schemas.semantic import SemanticData, SemanticSimilarityResult, SemanticSkillMatch
from models.schemas.tool_data import (
    ExperienceSignals,
    KeywordList,
    KeywordOverlap,
    RequiredSkills,
    ToolDataJobMatch,
)
from services import progress as steps
from services.errors import AIServiceError
from services.experience import extract_experience_years, extract_required_years
from services.keyword_matcher import build_keyword_tool_data
from services.llm_client import LLMClient, get_llm_client
from services.pipeline.agent_executor import execute_agents
from services.pipeline.error_handler import (
    extraction_warning,
    handle_agent_error,
    handle_extraction_error,
)
from services.pipeline.response_builder import build_job_match_response
from services.progress import ProgressStream
from services.prompt_builder import JobMatchAgentContext
from services.provider_profiles import resolve_agent_profile, resolve_extraction_profile
from services.resilience import RetryPolicy, gather_or_cancel, with_timeout
from services.scoring import (
    ScoreDomain,
    calculate_allowed_variance,
    calculate_job_match_score,
    round_half_up,
    score_bounds,
    validate_score,
)
from services.semantic_extraction import (
    calculate_semantic_similarity,
    generate_match_explanation,
    perform_semantic_skill_match,
)

logger = logging.getLogger(__name__)


def build_semantic_tool_data(
    skill_match: SemanticSkillMatch, similarity: SemanticSimilarityResult
) -> ToolDataJobMatch:
    """Job-match evidence from semantic results.

    Related matches count as matched skills; overlap is the similarity score.
    """
    matched = [m.skill for m in skill_match.exact_matches] + [m.job_skill for m in skill_match.related_matches]
    missing = [m.skill for m in skill_match.missing_skills]
    job_skills = matched + missing
    return ToolDataJobMatch(
        keyword_overlap=KeywordOverlap(
            overlap_percentage=similarity.similarity_score,
            matched_keywords=matched,
            missing_keywords=missing,
            total_job_keywords=len(job_skills),
        ),
        resume_keywords=KeywordList(keywords=matched, count=len(matched)),
        job_keywords=KeywordList(keywords=job_skills, count=len(job_skills)),
        required_skills=RequiredSkills(
            required_skills=[m.skill for m in skill_match.missing_skills if m.importance == "critical"],
            preferred_skills=[m.skill for m in skill_match.missing_skills if m.importance == "important"],
            total_skills=len(job_skills),
        ),
    )


async def multi_agent_job_match(
    resume_text: str,
    job_text: str,
    provider: str,
    model_name: str,
    progress: ProgressStream | None = None,
    *,
    client: LLMClient | None = None,
    keyword_fallback: bool | None = None,
    semantic_timeout_ms: int | None = None,
    agent_timeout_ms: int | None = None,
    retry_policy: RetryPolicy | None = None,
) -> CollaborativeResult[JobMatchResponse]:
    """Score how well a preprocessed resume fits a preprocessed job description.

    Raises ``AIUnavailableError`` if semantic extraction fails (unless the
    keyword fallback is enabled) and ``AnalysisFailedError`` if either agent
    fails.
    """
    progress = progress or ProgressStream()
    client = client or get_llm_client(provider, model_name)
    extraction = resolve_extraction_profile(provider)
    agents = resolve_agent_profile(provider, ScoreDomain.JOB_MATCH)
    if keyword_fallback is None:
        keyword_fallback = settings.job_match_keyword_fallback
    timeout_ms = semantic_timeout_ms or settings.semantic_timeout_ms
    warnings: list[str] = []

    # --- Stage 1: Tool extraction ---
    progress.send_started(steps.TOOL_EXTRACTION, agent_number=0)
    try:
        skill_match, similarity = await gather_or_cancel(
            with_timeout(
                perform_semantic_skill_match(client, extraction, resume_text, job_text),
                timeout_ms,
                "perform_semantic_skill_match",
            ),
            with_timeout(
                calculate_semantic_similarity(client, extraction, resume_text, job_text),
                timeout_ms,
                "calculate_semantic_similarity",
            ),
        )
        semantic = SemanticData(
            skill_match=skill_match,
            similarity=similarity,
            match_explanation=generate_match_explanation(skill_match, similarity),
        )
        tool_data = build_semantic_tool_data(skill_match, similarity)
    except AIServiceError as e:
        if not keyword_fallback:
            handle_extraction_error(e, progress, ScoreDomain.JOB_MATCH)
        logger.warning("Semantic extraction failed, scoring from keyword overlap: %s", e)
        progress.send_warning(
            steps.TOOL_EXTRACTION,
            f"{extraction_warning(e)} Falling back to keyword matching.",
            agent_number=0,
        )
        warnings.append("Semantic analysis unavailable; match scored from keyword overlap only")
        semantic = SemanticData()
        tool_data = build_keyword_tool_data(resume_text, job_text)

    tool_data.experience = ExperienceSignals(
        resume_years=extract_experience_years(resume_text),
        required_years=extract_required_years(job_text),
    )
    progress.send_completed(steps.TOOL_EXTRACTION, agent_number=0)

    # --- Stage 2: Baseline and allowed band ---
    matched_count = len(tool_data.keyword_overlap.matched_keywords)
    required_count = max(tool_data.required_skills.total_skills, tool_data.keyword_overlap.total_job_keywords)
    experience = tool_data.experience
    # No parseable history on the resume: score experience as unknown, not as zero
    required_years = experience.required_years if experience.resume_years > 0 else 0.0
    baseline = calculate_job_match_score(JobMatchSignals(
        keyword_overlap_percent=tool_data.keyword_overlap.overlap_percentage,
        matched_skills_count=matched_count,
        required_skills_count=required_count,
        experience_years=experience.resume_years,
        required_years=required_years,
    ))
    variance = calculate_allowed_variance(baseline.score, ScoreDomain.JOB_MATCH)
    min_score, max_score = score_bounds(baseline.score, variance)
    logger.info(
        "Job match baseline: %d, allowed variance: ±%d (%d-%d)",
        baseline.score, variance, min_score, max_score,
    )

    # --- Stage 3: Agents ---
    context = JobMatchAgentContext(
        resume_text=resume_text,
        job_text=job_text,
        tool_data=tool_data,
        baseline=baseline,
        min_score=min_score,
        max_score=max_score,
        semantic=semantic,
    )
    progress.send_started(steps.ANALYSIS_AGENT, agent_number=1)
    progress.send_started(steps.FEEDBACK_AGENT, agent_number=2)
    try:
        result = await execute_agents(client, agents, context, agent_timeout_ms, retry_policy)
    except Exception as e:
        handle_agent_error(e, progress, ScoreDomain.JOB_MATCH)
    progress.send_completed(steps.ANALYSIS_AGENT, agent_number=1)
    progress.send_completed(steps.FEEDBACK_AGENT, agent_number=2)

    # --- Stage 4: Validation ---
    progress.send_started(steps.VALIDATION)
    proposed = result.analysis_result.final_score
    validated = validate_score(proposed, baseline.score, variance)
    if validated != round_half_up(proposed):
        warnings.append(f"Score adjusted from {proposed:g} to {validated} (outside allowed variance)")
    progress.send_completed(steps.VALIDATION)

    response = build_job_match_response(
        validated,
        baseline,
        tool_data,
        semantic,
        result.analysis_result,
        result.feedback_result,
        matched_count,
        required_count,
    )
    progress.send_completed(steps.COMPLETE)

    return CollaborativeResult[JobMatchResponse](
        analysis=response,
        agent_insights=AgentInsights(analysis=result.analysis_result, feedback=result.feedback_result),
        baseline_score=baseline,
        allowed_variance=variance,
        warnings=warnings,
    )
