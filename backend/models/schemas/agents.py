"""Full-detail agent outputs: Analysis Agent and Feedback Agent."""

from pydantic import BaseModel, Field


class DataInsights(BaseModel):
    quantified_count: int = 0
    keyword_count: int = 0
    verb_count: int = 0
    format_quality: str = ""


class KeywordAnalysis(BaseModel):
    strength: str = ""
    ats_score: float = 0.0
    missing_critical: list[str] = []  # up to 5
    recommendations: list[str] = []  # up to 3


class ScoreAdjustment(BaseModel):
    criterion: str
    adjustment: float = 0.0
    reason: str = ""


class AnalysisResult(BaseModel):
    """Analysis Agent output.

    ``final_score`` is the agent's proposal; the pipeline clamps it into the
    allowed band around the baseline before anything is reported.
    """
    final_score: float = Field(default=0.0, allow_inf_nan=False)
    data_insights: DataInsights = DataInsights()
    keyword_analysis: KeywordAnalysis = KeywordAnalysis()
    adjustments: list[ScoreAdjustment] = []
    math: str = ""


class FeedbackResult(BaseModel):
    """Feedback Agent output."""
    strengths: list[str] = []
    weaknesses: list[str] = []
    suggestions: list[str] = []
    synthesis_notes: str = ""
