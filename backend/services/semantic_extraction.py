"""LLM-backed semantic extraction: keywords, action verbs, skill match, similarity.

Every extractor returns the full-detail shape whatever the provider tier,
and raises ``AIUnavailableError`` when the model cannot deliver.
"""

import logging

from models.schemas.semantic import (
    ActionVerbAnalysis,
    MatchExplanation,
    SemanticKeywordExtraction,
    SemanticSimilarityResult,
    SemanticSkillMatch,
)
from services.errors import AIUnavailableError, is_timeout_error
from services.llm_client import LLMClient
from services.provider_profiles import ExtractionProfile, ExtractionRole, ProviderTier

logger = logging.getLogger(__name__)


async def _extract(client: LLMClient, role: ExtractionRole, operation: str, *prompt_args):
    try:
        raw = await client.generate_structured(
            schema=role.schema,
            system_prompt=role.system_prompt,
            prompt=role.build_prompt(*prompt_args),
            temperature=role.temperature,
        )
    except Exception as e:
        logger.error("Semantic %s failed: %s", operation, e)
        raise AIUnavailableError(operation, timed_out=is_timeout_error(e)) from e
    return role.normalize(raw)


async def extract_semantic_keywords(
    client: LLMClient,
    profile: ExtractionProfile,
    text: str,
    context_hint: str | None = None,
) -> SemanticKeywordExtraction:
    return await _extract(client, profile.keywords, "keyword extraction", text, context_hint)


async def analyze_action_verbs(
    client: LLMClient, profile: ExtractionProfile, resume_text: str
) -> ActionVerbAnalysis:
    return await _extract(client, profile.action_verbs, "verb analysis", resume_text)


def _clean_skill_match(result: SemanticSkillMatch) -> SemanticSkillMatch:
    """Drop blank entries, and missing skills that are also exact matches."""
    exact = [m for m in result.exact_matches if m.skill.strip()]
    exact_names = {m.skill.strip().lower() for m in exact}
    return result.model_copy(update={
        "exact_matches": exact,
        "related_matches": [
            m for m in result.related_matches if m.job_skill.strip() and m.resume_skill.strip()
        ],
        "missing_skills": [
            m for m in result.missing_skills
            if m.skill.strip() and m.skill.strip().lower() not in exact_names
        ],
    })


async def perform_semantic_skill_match(
    client: LLMClient, profile: ExtractionProfile, resume_text: str, job_text: str
) -> SemanticSkillMatch:
    result = await _extract(client, profile.skill_match, "skill matching", resume_text, job_text)
    if profile.tier == ProviderTier.FULL:
        result = _clean_skill_match(result)
    return result


async def calculate_semantic_similarity(
    client: LLMClient, profile: ExtractionProfile, resume_text: str, job_text: str
) -> SemanticSimilarityResult:
    return await _extract(client, profile.similarity, "semantic similarity", resume_text, job_text)


def keyword_count(extraction: SemanticKeywordExtraction) -> int:
    if extraction.total_count > 0:
        return extraction.total_count
    return len(set(
        extraction.technical_skills
        + extraction.tools_platforms
        + extraction.methodologies
        + extraction.domain_knowledge
        + extraction.soft_skills
    ))


def verb_count(analysis: ActionVerbAnalysis) -> int:
    return len(analysis.strong_verbs)


# ---------------------------------------------------------------------------
# Match explanation
# ---------------------------------------------------------------------------

_URGENCY_ICONS = {"critical": "🔴", "important": "🟡", "nice-to-have": "🟢"}
_LEARNING_TIME = {"quick": "<1 month", "moderate": "1-3 months", "significant": "3+ months"}

FIT_ASSESSMENTS: list[tuple[float, str]] = [
    (75, "Excellent fit - You're a strong candidate for this role."),
    (60, "Good fit - You match most requirements with minor gaps."),
    (45, "Moderate fit - Some gaps exist but may be worth applying with a tailored resume."),
    (30, "Weak fit - Significant gaps; consider upskilling before applying."),
]
POOR_FIT = "Poor fit - This role may not align with your current skills and experience."
NO_ACTIONS = "No critical actions needed - proceed with application"


def fit_assessment(similarity_score: float) -> str:
    for threshold, text in FIT_ASSESSMENTS:
        if similarity_score >= threshold:
            return text
    return POOR_FIT


def generate_match_explanation(
    skill_match: SemanticSkillMatch, similarity: SemanticSimilarityResult
) -> MatchExplanation:
    """Turn a skill match and a similarity result into readable explanation lines."""
    strengths = [
        f'✅ **{m.skill}**: Directly matches requirement - "{m.resume_evidence[:60]}..."'
        for m in skill_match.exact_matches[:3]
    ]
    strengths += [
        f"⚡ **{m.resume_skill}** transfers to **{m.job_skill}** ({m.similarity:g}% similar): {m.explanation}"
        for m in skill_match.related_matches[:2]
    ]

    gaps = [
        f"{_URGENCY_ICONS[s.importance]} **{s.skill}** ({s.importance}): "
        f"Learning time ~{_LEARNING_TIME[s.learnability]}"
        for s in skill_match.missing_skills[:4]
    ]

    transferable = [
        f"💡 {s.resume_skill} → {s.job_skill}: {s.how_it_transfers}"
        for s in similarity.transferable_skills
    ]

    actions: list[str] = []
    critical = [s.skill for s in skill_match.missing_skills if s.importance == "critical"]
    if critical:
        actions.append(f"🔴 Address critical gaps first: {', '.join(critical)}")
    quick_wins = [
        s.skill for s in skill_match.missing_skills
        if s.learnability == "quick" and s.importance != "nice-to-have"
    ]
    if quick_wins:
        actions.append(f"⚡ Quick wins (learn in <1 month): {', '.join(quick_wins)}")
    if skill_match.related_matches:
        highlights = ", ".join(m.resume_skill for m in skill_match.related_matches[:3])
        actions.append(f"📝 Highlight transferable skills in cover letter: {highlights}")

    return MatchExplanation(
        summary=similarity.match_explanation,
        fit_assessment=fit_assessment(similarity.similarity_score),
        strengths_explanation=strengths,
        gaps_explanation=gaps,
        transferable_explanation=transferable,
        action_items=actions or [NO_ACTIONS],
    )
