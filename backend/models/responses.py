from typing import Generic, TypeVar

from pydantic import BaseModel

from models.schemas.agents import AnalysisResult, FeedbackResult
from models.schemas.scoring import BaselineScore


class AnalysisCategory(BaseModel):
    category: str
    value: list[str] = []


class ResumeReviewResponse(BaseModel):
    score: int = 0
    summary: str = ""
    strengths: list[str] = []
    weaknesses: list[str] = []
    suggestions: list[str] = []
    detailed_analysis: list[AnalysisCategory] = []


class JobMatchResponse(BaseModel):
    matching_score: int = 0
    detailed_analysis: list[AnalysisCategory] = []
    suggestions: list[AnalysisCategory] = []
    additional_comments: list[str] = []


class AgentInsights(BaseModel):
    analysis: AnalysisResult
    feedback: FeedbackResult


ResponseT = TypeVar("ResponseT", ResumeReviewResponse, JobMatchResponse)


class CollaborativeResult(BaseModel, Generic[ResponseT]):
    """Final pipeline output: public response plus the evidence behind it."""
    analysis: ResponseT
    agent_insights: AgentInsights
    baseline_score: BaselineScore
    allowed_variance: int = 0
    warnings: list[str] = []


class ErrorResponse(BaseModel):
    code: str
    message: str
    reset_in_ms: int | None = None
