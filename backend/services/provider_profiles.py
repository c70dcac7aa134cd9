"""Provider tiers and the per-tier bundles of schema, prompt and normalizer.

The tier of a provider is looked up once per request; everything downstream
works off the resolved profile and never branches on the provider again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel

from config import settings
from models.schemas.agents import AnalysisResult, FeedbackResult
from models.schemas.local import (
    LocalActionVerbAnalysis,
    LocalAnalysisAgent,
    LocalFeedbackAgent,
    LocalKeywordExtraction,
    LocalSemanticSimilarity,
    LocalSkillMatch,
)
from models.schemas.semantic import (
    ActionVerbAnalysis,
    SemanticKeywordExtraction,
    SemanticSimilarityResult,
    SemanticSkillMatch,
)
from services import normalizers, prompt_builder as pb
from services.scoring import ScoreDomain


class ProviderTier(str, Enum):
    FULL = "full"
    LOCAL = "local"


LOCAL_PROVIDERS = frozenset({"ollama"})

KEYWORD_TEMPERATURE = 0.1
SEMANTIC_TEMPERATURE = 0.2


def provider_tier(provider: str) -> ProviderTier:
    return ProviderTier.LOCAL if provider in LOCAL_PROVIDERS else ProviderTier.FULL


@dataclass(frozen=True)
class ExtractionRole:
    schema: type[BaseModel]
    system_prompt: str
    build_prompt: Callable[..., str]
    normalize: Callable[[Any], BaseModel]
    temperature: float


@dataclass(frozen=True)
class ExtractionProfile:
    tier: ProviderTier
    keywords: ExtractionRole
    action_verbs: ExtractionRole
    skill_match: ExtractionRole
    similarity: ExtractionRole


@dataclass(frozen=True)
class AgentRole:
    name: str
    schema: type[BaseModel]
    system_prompt: str
    build_prompt: Callable[[Any], str]
    normalize: Callable[[Any, Any], BaseModel]
    temperature: float


@dataclass(frozen=True)
class AgentProfile:
    tier: ProviderTier
    analysis: AgentRole
    feedback: AgentRole


_FULL_EXTRACTION = ExtractionProfile(
    tier=ProviderTier.FULL,
    keywords=ExtractionRole(
        SemanticKeywordExtraction, pb.KEYWORD_SYSTEM_PROMPT, pb.build_keyword_prompt,
        normalizers.normalize_keywords, KEYWORD_TEMPERATURE,
    ),
    action_verbs=ExtractionRole(
        ActionVerbAnalysis, pb.VERB_SYSTEM_PROMPT, pb.build_verb_prompt,
        normalizers.normalize_action_verbs, SEMANTIC_TEMPERATURE,
    ),
    skill_match=ExtractionRole(
        SemanticSkillMatch, pb.SKILL_MATCH_SYSTEM_PROMPT, pb.build_skill_match_prompt,
        normalizers.normalize_skill_match, SEMANTIC_TEMPERATURE,
    ),
    similarity=ExtractionRole(
        SemanticSimilarityResult, pb.SIMILARITY_SYSTEM_PROMPT, pb.build_similarity_prompt,
        normalizers.normalize_similarity, SEMANTIC_TEMPERATURE,
    ),
)

_LOCAL_EXTRACTION = ExtractionProfile(
    tier=ProviderTier.LOCAL,
    keywords=ExtractionRole(
        LocalKeywordExtraction, pb.LOCAL_KEYWORD_SYSTEM_PROMPT, pb.build_local_keyword_prompt,
        normalizers.normalize_keywords, KEYWORD_TEMPERATURE,
    ),
    action_verbs=ExtractionRole(
        LocalActionVerbAnalysis, pb.LOCAL_VERB_SYSTEM_PROMPT, pb.build_local_verb_prompt,
        normalizers.normalize_action_verbs, SEMANTIC_TEMPERATURE,
    ),
    skill_match=ExtractionRole(
        LocalSkillMatch, pb.LOCAL_SKILL_MATCH_SYSTEM_PROMPT, pb.build_local_skill_match_prompt,
        normalizers.normalize_skill_match, SEMANTIC_TEMPERATURE,
    ),
    similarity=ExtractionRole(
        LocalSemanticSimilarity, pb.LOCAL_SIMILARITY_SYSTEM_PROMPT, pb.build_local_similarity_prompt,
        normalizers.normalize_similarity, SEMANTIC_TEMPERATURE,
    ),
)


def resolve_extraction_profile(provider: str) -> ExtractionProfile:
    if provider_tier(provider) == ProviderTier.LOCAL:
        return _LOCAL_EXTRACTION
    return _FULL_EXTRACTION


def _normalize_analysis(raw, ctx) -> AnalysisResult:
    return normalizers.normalize_analysis(raw, verb_count=ctx.verb_count)


def _normalize_feedback(raw, ctx) -> FeedbackResult:
    return normalizers.normalize_feedback(raw)


_AGENT_PROMPTS = {
    (ProviderTier.FULL, ScoreDomain.RESUME): (
        (pb.RESUME_ANALYSIS_SYSTEM_PROMPT, pb.build_resume_analysis_prompt),
        (pb.RESUME_FEEDBACK_SYSTEM_PROMPT, pb.build_resume_feedback_prompt),
    ),
    (ProviderTier.LOCAL, ScoreDomain.RESUME): (
        (pb.LOCAL_RESUME_ANALYSIS_SYSTEM_PROMPT, pb.build_local_resume_analysis_prompt),
        (pb.LOCAL_RESUME_FEEDBACK_SYSTEM_PROMPT, pb.build_local_resume_feedback_prompt),
    ),
    (ProviderTier.FULL, ScoreDomain.JOB_MATCH): (
        (pb.JOB_MATCH_ANALYSIS_SYSTEM_PROMPT, pb.build_job_match_analysis_prompt),
        (pb.JOB_MATCH_FEEDBACK_SYSTEM_PROMPT, pb.build_job_match_feedback_prompt),
    ),
    (ProviderTier.LOCAL, ScoreDomain.JOB_MATCH): (
        (pb.LOCAL_JOB_MATCH_ANALYSIS_SYSTEM_PROMPT, pb.build_local_job_match_analysis_prompt),
        (pb.LOCAL_JOB_MATCH_FEEDBACK_SYSTEM_PROMPT, pb.build_local_job_match_feedback_prompt),
    ),
}


def resolve_agent_profile(provider: str, domain: ScoreDomain) -> AgentProfile:
    tier = provider_tier(provider)
    local = tier == ProviderTier.LOCAL
    (analysis_system, analysis_prompt), (feedback_system, feedback_prompt) = _AGENT_PROMPTS[(tier, domain)]

    return AgentProfile(
        tier=tier,
        analysis=AgentRole(
            name="Analysis Agent",
            schema=LocalAnalysisAgent if local else AnalysisResult,
            system_prompt=analysis_system,
            build_prompt=analysis_prompt,
            normalize=_normalize_analysis,
            temperature=settings.analysis_temperature,
        ),
        feedback=AgentRole(
            name="Feedback Agent",
            schema=LocalFeedbackAgent if local else FeedbackResult,
            system_prompt=feedback_system,
            build_prompt=feedback_prompt,
            normalize=_normalize_feedback,
            temperature=settings.feedback_temperature,
        ),
    )
