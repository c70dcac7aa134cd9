"""Map simplified local-model outputs onto the full-detail shapes.

Every normalizer returns full-shape input unchanged, so running one twice
is the same as running it once.
"""

from models.schemas.agents import (
    AnalysisResult,
    DataInsights,
    FeedbackResult,
    KeywordAnalysis,
)
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
    ExactSkillMatch,
    MissingSkill,
    SemanticKeywordExtraction,
    SemanticSimilarityResult,
    SemanticSkillMatch,
    SkillGap,
    StrongVerb,
    WeakVerb,
)

LOCAL_LIST_LIMIT = 3
GOOD_FIT_THRESHOLD = 60


def normalize_keywords(
    raw: LocalKeywordExtraction | SemanticKeywordExtraction,
) -> SemanticKeywordExtraction:
    if isinstance(raw, SemanticKeywordExtraction):
        return raw
    return SemanticKeywordExtraction(
        technical_skills=raw.technical_skills,
        tools_platforms=raw.tools,
        total_count=raw.total_count,
    )


def normalize_action_verbs(
    raw: LocalActionVerbAnalysis | ActionVerbAnalysis,
) -> ActionVerbAnalysis:
    if isinstance(raw, ActionVerbAnalysis):
        return raw
    return ActionVerbAnalysis(
        strong_verbs=[
            StrongVerb(verb=v, context="Found in resume", impact_level="medium")
            for v in raw.strong_verbs
        ],
        weak_verbs=[
            WeakVerb(verb=v, context="Found in resume", suggestion="")
            for v in raw.weak_verbs
        ],
        verb_strength_score=raw.verb_strength_score,
    )


def normalize_skill_match(raw: LocalSkillMatch | SemanticSkillMatch) -> SemanticSkillMatch:
    if isinstance(raw, SemanticSkillMatch):
        return raw
    return SemanticSkillMatch(
        exact_matches=[
            ExactSkillMatch(skill=m.skill, resume_evidence=m.evidence, job_requirement="Required by job")
            for m in raw.matched_skills
            if m.skill.strip()
        ],
        missing_skills=[
            MissingSkill(skill=s, importance="important", learnability="moderate")
            for s in raw.missing_skills
            if s.strip()
        ],
        overall_match_percentage=raw.match_percentage,
    )


def normalize_similarity(
    raw: LocalSemanticSimilarity | SemanticSimilarityResult,
) -> SemanticSimilarityResult:
    if isinstance(raw, SemanticSimilarityResult):
        return raw
    return SemanticSimilarityResult(
        similarity_score=raw.similarity_score,
        match_explanation=raw.match_explanation,
        key_gaps=[
            SkillGap(skill=gap, note="Missing from resume")
            for gap in raw.key_gaps[:LOCAL_LIST_LIMIT]
        ],
        application_recommendation=(
            "Consider applying - good fit"
            if raw.similarity_score >= GOOD_FIT_THRESHOLD
            else "Consider upskilling before applying"
        ),
    )


def normalize_analysis(
    raw: LocalAnalysisAgent | AnalysisResult, verb_count: int = 0
) -> AnalysisResult:
    """``verb_count`` fills the one insight local models are not asked for."""
    if isinstance(raw, AnalysisResult):
        return raw
    return AnalysisResult(
        final_score=raw.final_score,
        data_insights=DataInsights(
            quantified_count=raw.quantified_count,
            keyword_count=raw.keyword_count,
            verb_count=verb_count,
            format_quality="Not assessed",
        ),
        keyword_analysis=KeywordAnalysis(
            strength=raw.score_explanation,
            ats_score=raw.ats_score,
            missing_critical=raw.missing_keywords[:LOCAL_LIST_LIMIT],
        ),
        math=raw.score_explanation,
    )


def normalize_feedback(raw: LocalFeedbackAgent | FeedbackResult) -> FeedbackResult:
    if isinstance(raw, FeedbackResult):
        return raw
    return FeedbackResult(
        strengths=raw.strengths[:LOCAL_LIST_LIMIT],
        weaknesses=raw.weaknesses[:LOCAL_LIST_LIMIT],
        suggestions=raw.suggestions[:LOCAL_LIST_LIMIT],
        synthesis_notes=raw.summary,
    )
