"""Baseline scoring inputs and output."""

from pydantic import BaseModel, ConfigDict


class ResumeSignals(BaseModel):
    """Deterministic resume signals fed to the resume baseline."""
    quantified_count: int = 0
    keyword_count: int = 0
    verb_count: int = 0
    has_bullet_points: bool = False
    section_count: int = 0


class JobMatchSignals(BaseModel):
    """Deterministic job-match signals fed to the job-match baseline."""
    keyword_overlap_percent: float = 0.0
    matched_skills_count: int = 0
    required_skills_count: int = 0
    experience_years: float = 0.0
    required_years: float = 0.0


class BaselineScore(BaseModel):
    """Immutable baseline score.

    ``breakdown`` maps criterion name to its sub-score; rounding the sum of
    its values gives ``score``.
    """
    model_config = ConfigDict(frozen=True)

    score: int
    breakdown: dict[str, float]
