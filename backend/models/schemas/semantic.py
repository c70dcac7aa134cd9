"""Full-detail semantic extraction shapes (cloud provider tier).

Simplified local-tier shapes in ``models.schemas.local`` are normalized into
these before anything downstream sees them.
"""

from typing import Literal

from pydantic import BaseModel


class SemanticKeywordExtraction(BaseModel):
    """Keywords grouped by kind."""
    technical_skills: list[str] = []
    tools_platforms: list[str] = []
    methodologies: list[str] = []
    domain_knowledge: list[str] = []
    soft_skills: list[str] = []
    total_count: int = 0


class StrongVerb(BaseModel):
    verb: str
    context: str = ""
    impact_level: Literal["high", "medium"] = "medium"


class WeakVerb(BaseModel):
    verb: str
    context: str = ""
    suggestion: str = ""


class ActionVerbAnalysis(BaseModel):
    strong_verbs: list[StrongVerb] = []
    weak_verbs: list[WeakVerb] = []
    verb_strength_score: float = 0.0  # 0-10


class ExactSkillMatch(BaseModel):
    skill: str
    resume_evidence: str = ""
    job_requirement: str = ""


class RelatedSkillMatch(BaseModel):
    job_skill: str
    resume_skill: str
    similarity: float = 0.0  # 0-100
    explanation: str = ""


class MissingSkill(BaseModel):
    skill: str
    importance: Literal["critical", "important", "nice-to-have"] = "important"
    learnability: Literal["quick", "moderate", "significant"] = "moderate"


class SemanticSkillMatch(BaseModel):
    exact_matches: list[ExactSkillMatch] = []
    related_matches: list[RelatedSkillMatch] = []
    missing_skills: list[MissingSkill] = []
    overall_match_percentage: float = 0.0


class SkillGap(BaseModel):
    skill: str
    note: str = ""


class TransferableSkill(BaseModel):
    resume_skill: str
    job_skill: str
    how_it_transfers: str = ""


class SemanticSimilarityResult(BaseModel):
    similarity_score: float = 0.0  # 0-100
    match_explanation: str = ""
    key_matches: list[str] = []
    key_gaps: list[SkillGap] = []
    transferable_skills: list[TransferableSkill] = []
    application_recommendation: str = ""


class MatchExplanation(BaseModel):
    """Human-readable synthesis of a skill match and a similarity result."""
    summary: str = ""
    fit_assessment: str = ""
    strengths_explanation: list[str] = []
    gaps_explanation: list[str] = []
    transferable_explanation: list[str] = []
    action_items: list[str] = []


class SemanticData(BaseModel):
    """Semantic results carried through a job match; all empty on the keyword fallback path."""
    skill_match: SemanticSkillMatch | None = None
    similarity: SemanticSimilarityResult | None = None
    match_explanation: MatchExplanation | None = None
