"""Simplified output shapes requested from small local models."""

from pydantic import BaseModel, Field


class LocalKeywordExtraction(BaseModel):
    technical_skills: list[str] = []
    tools: list[str] = []
    total_count: int = 0


class LocalActionVerbAnalysis(BaseModel):
    strong_verbs: list[str] = []
    weak_verbs: list[str] = []
    verb_strength_score: float = 0.0


class LocalMatchedSkill(BaseModel):
    skill: str = ""
    evidence: str = ""


class LocalSkillMatch(BaseModel):
    matched_skills: list[LocalMatchedSkill] = []
    missing_skills: list[str] = []
    match_percentage: float = 0.0


class LocalSemanticSimilarity(BaseModel):
    similarity_score: float = 0.0
    match_explanation: str = ""
    key_gaps: list[str] = []  # up to 3


class LocalAnalysisAgent(BaseModel):
    final_score: float = Field(default=0.0, allow_inf_nan=False)
    quantified_count: int = 0
    keyword_count: int = 0
    ats_score: float = 0.0
    missing_keywords: list[str] = []  # up to 3
    score_explanation: str = ""


class LocalFeedbackAgent(BaseModel):
    strengths: list[str] = []  # up to 3
    weaknesses: list[str] = []  # up to 3
    suggestions: list[str] = []  # up to 3
    summary: str = ""
