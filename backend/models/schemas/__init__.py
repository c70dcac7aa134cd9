"""Pydantic contracts shared by the extraction tools, agents and pipelines."""

from models.schemas.agents import AnalysisResult, FeedbackResult
from models.schemas.local import (
    LocalActionVerbAnalysis,
    LocalAnalysisAgent,
    LocalFeedbackAgent,
    LocalKeywordExtraction,
    LocalSemanticSimilarity,
    LocalSkillMatch,
)
from models.schemas.preprocessing import PreprocessingErrorCode, PreprocessingResult
from models.schemas.progress import ProgressStatus, ProgressUpdate
from models.schemas.scoring import BaselineScore, JobMatchSignals, ResumeSignals
from models.schemas.semantic import (
    ActionVerbAnalysis,
    MatchExplanation,
    SemanticData,
    SemanticKeywordExtraction,
    SemanticSimilarityResult,
    SemanticSkillMatch,
)
from models.schemas.tool_data import ToolDataJobMatch, ToolDataResume

__all__ = [
    "ActionVerbAnalysis",
    "AnalysisResult",
    "BaselineScore",
    "FeedbackResult",
    "JobMatchSignals",
    "LocalActionVerbAnalysis",
    "LocalAnalysisAgent",
    "LocalFeedbackAgent",
    "LocalKeywordExtraction",
    "LocalSemanticSimilarity",
    "LocalSkillMatch",
    "MatchExplanation",
    "PreprocessingErrorCode",
    "PreprocessingResult",
    "ProgressStatus",
    "ProgressUpdate",
    "ResumeSignals",
    "SemanticData",
    "SemanticKeywordExtraction",
    "SemanticSimilarityResult",
    "SemanticSkillMatch",
    "ToolDataJobMatch",
    "ToolDataResume",
]
