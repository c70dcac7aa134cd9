"""Tests for response assembly and failure handling."""

import pytest

from models.schemas.agents import AnalysisResult, FeedbackResult, KeywordAnalysis
from models.schemas.scoring import BaselineScore
from models.schemas.semantic import SemanticData
from models.schemas.tool_data import (
    FormattingAnalysis,
    KeywordList,
    KeywordOverlap,
    QuantifiedAchievements,
    ToolDataJobMatch,
    ToolDataResume,
)
from services.errors import AIUnavailableError, AnalysisFailedError, LLMProviderError, LLMTimeoutError
from services.pipeline.error_handler import handle_agent_error, handle_extraction_error
from services.pipeline.response_builder import (
    build_job_match_response,
    build_resume_review_response,
    match_strength,
    resume_score_category,
)
from services.progress import ProgressStream
from services.scoring import ScoreDomain


@pytest.mark.parametrize("score,category", [(85, "above average"), (70, "above average"), (55, "average"), (20, "below average")])
def test_resume_score_category(score, category):
    assert resume_score_category(score) == category


@pytest.mark.parametrize("score,strength", [(70, "Strong"), (50, "Moderate"), (49, "Weak")])
def test_match_strength(score, strength):
    assert match_strength(score) == strength


def test_resume_review_response():
    baseline = BaselineScore(score=62, breakdown={"quantified_achievements": 12.7, "keywords": 14, "formatting": 12})
    tool_data = ToolDataResume(
        quantified_achievements=QuantifiedAchievements(count=4, examples=["35%", "team of 4"]),
        keywords=KeywordList(keywords=["Python", "Kafka"], count=2),
        formatting=FormattingAnalysis(has_bullet_points=True, section_count=4, average_line_length=48.5),
    )
    feedback = FeedbackResult(strengths=["Clear metrics"], weaknesses=["No summary"], suggestions=["Add a summary"])

    response = build_resume_review_response(64, baseline, tool_data, feedback)

    assert response.score == 64
    assert response.summary == "This resume scores 64/100, which is average. Clear metrics"
    categories = [c.category for c in response.detailed_analysis]
    assert categories[0] == "Quantified Achievements (12.7/25 pts)"
    assert categories[3] == "Formatting (12/15 pts)"
    assert response.detailed_analysis[0].value == ["4 measurable results found", "35%", "team of 4"]
    assert response.detailed_analysis[3].value[0] == "Uses bullet points"


def test_resume_review_response_without_strengths():
    response = build_resume_review_response(
        40, BaselineScore(score=40, breakdown={}), ToolDataResume(), FeedbackResult()
    )
    assert response.summary.endswith("Multiple strengths identified.")


@pytest.mark.parametrize("score,recommendation", [
    (75, "Apply now - strong match"),
    (55, "Apply after addressing key gaps"),
    (30, "Consider upskilling before applying"),
])
def test_job_match_recommendation_without_semantic_data(score, recommendation):
    tool_data = ToolDataJobMatch(keyword_overlap=KeywordOverlap(
        overlap_percentage=40, matched_keywords=["python"], missing_keywords=["kafka"], total_job_keywords=2,
    ))
    response = build_job_match_response(
        score,
        BaselineScore(score=50, breakdown={"skills_match": 15, "keyword_overlap": 8}),
        tool_data,
        SemanticData(),
        AnalysisResult(keyword_analysis=KeywordAnalysis(strength="Partial", missing_critical=["kafka"])),
        FeedbackResult(suggestions=["Learn Kafka"], synthesis_notes="Partial fit"),
        1,
        2,
    )
    assert response.additional_comments[2] == f"Recommendation: {recommendation}"
    assert response.detailed_analysis[-1].value == ["Partial fit"]
    assert [s.category for s in response.suggestions] == ["Skills to Add", "Top Improvements"]


def test_extraction_error_warns_and_raises():
    events = []
    with pytest.raises(AIUnavailableError) as exc_info:
        handle_extraction_error(LLMTimeoutError("x", 10), ProgressStream(events.append), ScoreDomain.JOB_MATCH)

    assert exc_info.value.timed_out is True
    assert exc_info.value.operation == "job matching"
    assert events[0].agent_number == 0
    assert "timed out" in events[0].message


def test_agent_error_generic():
    events = []
    with pytest.raises(AnalysisFailedError) as exc_info:
        handle_agent_error(LLMProviderError("quota exceeded"), ProgressStream(events.append), ScoreDomain.RESUME)

    assert str(exc_info.value) == "Resume review failed: quota exceeded"
    assert exc_info.value.timed_out is False
    assert events[0].message == "Agent failed: quota exceeded"
