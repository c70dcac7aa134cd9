"""Deterministic baseline scoring and the variance band LLM scores must respect.

The same signals always produce the same baseline. Agents may move the
score, but only within ``calculate_allowed_variance`` points of it;
``validate_score`` enforces that.
"""

import logging
import math
from enum import Enum

from models.schemas.scoring import BaselineScore, JobMatchSignals, ResumeSignals

logger = logging.getLogger(__name__)


class ScoreDomain(str, Enum):
    RESUME = "resume"
    JOB_MATCH = "job-match"


RESUME_CRITERIA_MAX: dict[str, int] = {
    "quantified_achievements": 25,
    "keywords": 20,
    "action_verbs": 10,
    "formatting": 15,
    "summary": 10,
    "experience_clarity": 10,
    "skills_section": 5,
    "grammar": 5,
}

# Criteria without a deterministic signal get a fixed mid-range credit
RESUME_DEFAULTS: dict[str, float] = {
    "summary": 6,
    "experience_clarity": 6,
    "skills_section": 3,
    "grammar": 4,
}

JOB_MATCH_CRITERIA_MAX: dict[str, int] = {
    "skills_match": 30,
    "experience_match": 25,
    "keyword_overlap": 20,
    "qualifications": 15,
    "industry_fit": 10,
}

JOB_MATCH_DEFAULTS: dict[str, float] = {
    "qualifications": 8,
    "industry_fit": 5,
}

SCORING_GUIDELINES = {
    ScoreDomain.RESUME: (
        "Criteria (max points): quantified achievements 25, keywords 20, "
        "action verbs 10, formatting 15, summary 10, experience clarity 10, "
        "skills section 5, grammar 5."
    ),
    ScoreDomain.JOB_MATCH: (
        "Criteria (max points): skills match 30, experience match 25, "
        "keyword overlap 20, qualifications 15, industry fit 10."
    ),
}


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (``round`` would go to even)."""
    return math.floor(value + 0.5)


# ---------------------------------------------------------------------------
# Resume baseline
# ---------------------------------------------------------------------------

def _keyword_points(count: int) -> float:
    if count <= 0:
        return 0
    if count < 5:
        return min(count * 1.6, 8)
    if count < 10:
        return 8 + (count - 5) * 1.2
    if count < 15:
        return 14 + (count - 10) * 1.2
    return 20


def _achievement_points(count: int) -> float:
    if count <= 0:
        return 0
    if count < 3:
        return count * 3.3
    if count < 6:
        return 10 + (count - 3) * 2.7
    if count < 10:
        return 18 + (count - 6) * 1.75
    return 25


def _verb_points(count: int) -> float:
    if count <= 0:
        return 0
    if count < 5:
        return count
    if count < 10:
        return 5 + (count - 5) * 0.6
    if count < 15:
        return 8 + (count - 10) * 0.4
    return 10


def _formatting_points(has_bullet_points: bool, section_count: int) -> float:
    points = 8 if has_bullet_points else 3
    if section_count < 3:
        points += 2
    elif section_count < 5:
        points += 5
    else:
        points += 7
    return points


def calculate_resume_score(signals: ResumeSignals) -> BaselineScore:
    breakdown: dict[str, float] = {
        "quantified_achievements": _achievement_points(signals.quantified_count),
        "keywords": _keyword_points(signals.keyword_count),
        "action_verbs": _verb_points(signals.verb_count),
        "formatting": _formatting_points(signals.has_bullet_points, signals.section_count),
        **RESUME_DEFAULTS,
    }
    score = round_half_up(_clamp(sum(breakdown.values())))
    return BaselineScore(score=score, breakdown=breakdown)


# ---------------------------------------------------------------------------
# Job-match baseline
# ---------------------------------------------------------------------------

def _skills_points(matched: int, required: int) -> float:
    if required <= 0:
        return 15
    points = round_half_up(matched / required * 30)
    if matched > 0:
        points = max(points, 5)
    return min(points, 30)


def _experience_points(years: float, required_years: float) -> float:
    if required_years <= 0:
        return 15
    ratio = years / required_years
    if ratio >= 1.5:
        return 25
    if ratio >= 1.0:
        return 20
    if ratio >= 0.75:
        return 15
    if ratio >= 0.5:
        return 10
    return round_half_up(ratio * 20)


def _overlap_points(overlap_percent: float) -> float:
    points = round_half_up(_clamp(overlap_percent) / 100 * 20)
    if overlap_percent > 0:
        points = max(points, 2)
    return points


def calculate_job_match_score(signals: JobMatchSignals) -> BaselineScore:
    breakdown: dict[str, float] = {
        "skills_match": _skills_points(signals.matched_skills_count, signals.required_skills_count),
        "experience_match": _experience_points(signals.experience_years, signals.required_years),
        "keyword_overlap": _overlap_points(signals.keyword_overlap_percent),
        **JOB_MATCH_DEFAULTS,
    }
    score = round_half_up(_clamp(sum(breakdown.values())))
    return BaselineScore(score=score, breakdown=breakdown)


# ---------------------------------------------------------------------------
# Variance band
# ---------------------------------------------------------------------------

def calculate_allowed_variance(baseline: float, domain: ScoreDomain = ScoreDomain.RESUME) -> int:
    """How far an agent may move the score away from ``baseline``.

    Mid-range scores are the most ambiguous and get the widest band.
    """
    if 40 <= baseline <= 60:
        return 15 if domain == ScoreDomain.JOB_MATCH else 12
    if 30 <= baseline < 40 or 60 < baseline <= 70:
        return 10
    if baseline < 30 or baseline > 80:
        return 7
    return 10


def score_bounds(baseline: float, variance: int) -> tuple[int, int]:
    return int(max(0, baseline - variance)), int(min(100, baseline + variance))


def validate_score(proposed: float, baseline: float, variance: int) -> int:
    """Clamp ``proposed`` into ``[baseline - variance, baseline + variance]`` within 0-100."""
    low, high = score_bounds(baseline, variance)
    if proposed < low:
        logger.warning("Score %s below allowed range [%d, %d], clamping to %d", proposed, low, high, low)
        return low
    if proposed > high:
        logger.warning("Score %s above allowed range [%d, %d], clamping to %d", proposed, low, high, high)
        return high
    return round_half_up(proposed)
