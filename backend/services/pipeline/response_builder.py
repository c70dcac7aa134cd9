"""Build the public review and match responses from agent output and evidence."""

from models.responses import AnalysisCategory, JobMatchResponse, ResumeReviewResponse
from models.schemas.agents import AnalysisResult, FeedbackResult
from models.schemas.scoring import BaselineScore
from models.schemas.semantic import SemanticData
from models.schemas.tool_data import ToolDataJobMatch, ToolDataResume
from services.scoring import JOB_MATCH_CRITERIA_MAX, RESUME_CRITERIA_MAX


def _points(baseline: BaselineScore, criterion: str) -> str:
    value = baseline.breakdown.get(criterion, 0)
    return f"{value:g}"


def resume_score_category(score: int) -> str:
    if score >= 70:
        return "above average"
    if score >= 50:
        return "average"
    return "below average"


def match_strength(score: int) -> str:
    if score >= 70:
        return "Strong"
    if score >= 50:
        return "Moderate"
    return "Weak"


# ---------------------------------------------------------------------------
# Resume review
# ---------------------------------------------------------------------------

def _resume_detailed_analysis(
    baseline: BaselineScore, tool_data: ToolDataResume
) -> list[AnalysisCategory]:
    quantified = tool_data.quantified_achievements
    fmt = tool_data.formatting
    max_pts = RESUME_CRITERIA_MAX
    return [
        AnalysisCategory(
            category=f"Quantified Achievements ({_points(baseline, 'quantified_achievements')}/{max_pts['quantified_achievements']} pts)",
            value=[f"{quantified.count} measurable results found", *quantified.examples],
        ),
        AnalysisCategory(
            category=f"Keywords ({_points(baseline, 'keywords')}/{max_pts['keywords']} pts)",
            value=[f"{tool_data.keywords.count} keywords found", ", ".join(tool_data.keywords.keywords[:10])],
        ),
        AnalysisCategory(
            category=f"Action Verbs ({_points(baseline, 'action_verbs')}/{max_pts['action_verbs']} pts)",
            value=[f"{tool_data.action_verbs.count} strong verbs", ", ".join(tool_data.action_verbs.verbs[:10])],
        ),
        AnalysisCategory(
            category=f"Formatting ({_points(baseline, 'formatting')}/{max_pts['formatting']} pts)",
            value=[
                "Uses bullet points" if fmt.has_bullet_points else "Few or no bullet points",
                f"{fmt.section_count} section headings",
                f"Average line length {fmt.average_line_length:g} characters",
            ],
        ),
    ]


def build_resume_review_response(
    validated_score: int,
    baseline: BaselineScore,
    tool_data: ToolDataResume,
    feedback: FeedbackResult,
) -> ResumeReviewResponse:
    lead = feedback.strengths[0] if feedback.strengths else "Multiple strengths identified."
    summary = (
        f"This resume scores {validated_score}/100, which is "
        f"{resume_score_category(validated_score)}. {lead}"
    )
    return ResumeReviewResponse(
        score=validated_score,
        summary=summary,
        strengths=feedback.strengths,
        weaknesses=feedback.weaknesses,
        suggestions=feedback.suggestions,
        detailed_analysis=_resume_detailed_analysis(baseline, tool_data),
    )


# ---------------------------------------------------------------------------
# Job match
# ---------------------------------------------------------------------------

def _skills_category(
    baseline: BaselineScore,
    tool_data: ToolDataJobMatch,
    semantic: SemanticData,
    matched_count: int,
    required_count: int,
) -> AnalysisCategory:
    title = f"Skills Match ({_points(baseline, 'skills_match')}/{JOB_MATCH_CRITERIA_MAX['skills_match']} pts)"
    skill_match = semantic.skill_match
    if skill_match is not None:
        lines = [
            f"{len(skill_match.exact_matches)} exact matches, "
            f"{len(skill_match.related_matches)} transferable skills, "
            f"{len(skill_match.missing_skills)} gaps"
        ]
        lines += [f'✅ {m.skill}: "{m.resume_evidence[:40]}..."' for m in skill_match.exact_matches[:3]]
        lines += [
            f"⚡ {m.resume_skill} → {m.job_skill} ({m.similarity:g}% similar)"
            for m in skill_match.related_matches[:2]
        ]
        lines += [
            f"❌ {s.skill} (critical, {s.learnability} to learn)"
            for s in skill_match.missing_skills if s.importance == "critical"
        ][:2]
        return AnalysisCategory(category=title, value=lines)

    overlap = tool_data.keyword_overlap
    return AnalysisCategory(
        category=title,
        value=[
            f"Matched {matched_count} of {required_count} required skills",
            *[f"✅ {k}" for k in overlap.matched_keywords[:5]],
            *[f"❌ {k}" for k in overlap.missing_keywords[:3]],
        ],
    )


def _fit_category(
    baseline: BaselineScore,
    tool_data: ToolDataJobMatch,
    semantic: SemanticData,
    analysis: AnalysisResult,
) -> AnalysisCategory:
    pts = f"{_points(baseline, 'keyword_overlap')}/{JOB_MATCH_CRITERIA_MAX['keyword_overlap']} pts"
    similarity = semantic.similarity
    if similarity is not None:
        return AnalysisCategory(
            category=f"Semantic Fit ({pts})",
            value=[
                f"{round(similarity.similarity_score)}% semantic match",
                similarity.match_explanation,
                *similarity.key_matches[:2],
            ],
        )
    return AnalysisCategory(
        category=f"Keyword Overlap ({pts})",
        value=[
            f"{round(tool_data.keyword_overlap.overlap_percentage)}% keyword match",
            analysis.keyword_analysis.strength,
        ],
    )


def build_job_match_response(
    validated_score: int,
    baseline: BaselineScore,
    tool_data: ToolDataJobMatch,
    semantic: SemanticData,
    analysis: AnalysisResult,
    feedback: FeedbackResult,
    matched_count: int,
    required_count: int,
) -> JobMatchResponse:
    detailed = [
        _skills_category(baseline, tool_data, semantic, matched_count, required_count),
        _fit_category(baseline, tool_data, semantic, analysis),
    ]

    similarity = semantic.similarity
    if similarity is not None and similarity.transferable_skills:
        detailed.append(AnalysisCategory(
            category="Transferable Skills",
            value=[
                f"💡 {s.resume_skill} → {s.job_skill}: {s.how_it_transfers}"
                for s in similarity.transferable_skills[:3]
            ],
        ))

    explanation = semantic.match_explanation
    detailed.append(AnalysisCategory(
        category="Overall Assessment",
        value=[explanation.fit_assessment if explanation else feedback.synthesis_notes],
    ))

    suggestions: list[AnalysisCategory] = []
    if explanation is not None and explanation.action_items:
        suggestions.append(AnalysisCategory(category="Priority Actions", value=explanation.action_items[:4]))
    suggestions.append(AnalysisCategory(category="Skills to Add", value=analysis.keyword_analysis.missing_critical[:4]))
    suggestions.append(AnalysisCategory(category="Top Improvements", value=feedback.suggestions[:4]))

    if similarity is not None and similarity.application_recommendation:
        recommendation = similarity.application_recommendation
    elif validated_score >= 70:
        recommendation = "Apply now - strong match"
    elif validated_score >= 50:
        recommendation = "Apply after addressing key gaps"
    else:
        recommendation = "Consider upskilling before applying"

    comment = similarity.match_explanation if similarity is not None and similarity.match_explanation else feedback.synthesis_notes

    return JobMatchResponse(
        matching_score=validated_score,
        detailed_analysis=detailed,
        suggestions=suggestions,
        additional_comments=[
            f"Score: {validated_score}/100 - {match_strength(validated_score)} match",
            comment,
            f"Recommendation: {recommendation}",
        ],
    )
