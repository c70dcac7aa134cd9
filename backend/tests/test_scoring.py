import pytest

from models.schemas.scoring import JobMatchSignals, ResumeSignals
from services.scoring import (
    RESUME_CRITERIA_MAX,
    ScoreDomain,
    calculate_allowed_variance,
    calculate_job_match_score,
    calculate_resume_score,
    score_bounds,
    validate_score,
)


def _resume(**overrides) -> ResumeSignals:
    values = dict(
        quantified_count=0,
        keyword_count=0,
        verb_count=0,
        has_bullet_points=False,
        section_count=1,
    )
    values.update(overrides)
    return ResumeSignals(**values)


class TestResumeScore:
    def test_empty_signals_score_defaults_only(self):
        baseline = calculate_resume_score(_resume())
        assert baseline.score == 24
        assert baseline.breakdown["formatting"] == 5
        assert baseline.breakdown["keywords"] == 0
        assert baseline.breakdown["quantified_achievements"] == 0
        assert baseline.breakdown["action_verbs"] == 0

    def test_strong_signals_hit_the_caps(self):
        baseline = calculate_resume_score(
            _resume(quantified_count=10, keyword_count=15, verb_count=15, has_bullet_points=True, section_count=5)
        )
        assert baseline.score == 89
        assert baseline.breakdown["keywords"] == 20
        assert baseline.breakdown["quantified_achievements"] == 25
        assert baseline.breakdown["action_verbs"] == 10
        assert baseline.breakdown["formatting"] == 15

    @pytest.mark.parametrize("count,points", [(0, 0), (3, 4.8), (5, 8), (7, 10.4), (10, 14), (40, 20)])
    def test_keyword_ramp(self, count, points):
        assert calculate_resume_score(_resume(keyword_count=count)).breakdown["keywords"] == pytest.approx(points)

    def test_breakdown_never_exceeds_criterion_max(self):
        baseline = calculate_resume_score(
            _resume(quantified_count=99, keyword_count=99, verb_count=99, has_bullet_points=True, section_count=20)
        )
        for criterion, value in baseline.breakdown.items():
            assert value <= RESUME_CRITERIA_MAX[criterion]

    def test_score_is_deterministic(self):
        signals = _resume(quantified_count=4, keyword_count=8, verb_count=6, section_count=3)
        assert calculate_resume_score(signals) == calculate_resume_score(signals)


class TestJobMatchScore:
    def test_partial_match_with_no_required_years(self):
        baseline = calculate_job_match_score(JobMatchSignals(
            keyword_overlap_percent=30,
            matched_skills_count=3,
            required_skills_count=10,
            experience_years=0,
            required_years=0,
        ))
        assert baseline.breakdown == {
            "skills_match": 9,
            "experience_match": 15,
            "keyword_overlap": 6,
            "qualifications": 8,
            "industry_fit": 5,
        }
        assert baseline.score == 43

        variance = calculate_allowed_variance(baseline.score, ScoreDomain.JOB_MATCH)
        assert variance == 15
        assert score_bounds(baseline.score, variance) == (28, 58)

    def test_skills_floor_when_any_match(self):
        baseline = calculate_job_match_score(JobMatchSignals(matched_skills_count=1, required_skills_count=20))
        assert baseline.breakdown["skills_match"] == 5

    def test_no_required_skills_is_neutral(self):
        assert calculate_job_match_score(JobMatchSignals()).breakdown["skills_match"] == 15

    def test_overlap_floor(self):
        baseline = calculate_job_match_score(JobMatchSignals(keyword_overlap_percent=1))
        assert baseline.breakdown["keyword_overlap"] == 2

    @pytest.mark.parametrize("years,points", [(9, 25), (6, 20), (4.5, 15), (3, 10), (1.5, 5), (0, 0)])
    def test_experience_tiers(self, years, points):
        baseline = calculate_job_match_score(JobMatchSignals(experience_years=years, required_years=6))
        assert baseline.breakdown["experience_match"] == points

    def test_full_match_caps_at_100(self):
        baseline = calculate_job_match_score(JobMatchSignals(
            keyword_overlap_percent=100,
            matched_skills_count=10,
            required_skills_count=10,
            experience_years=10,
            required_years=5,
        ))
        assert baseline.score == 88



    @pytest.mark.parametrize("matched,required,points", [(3, 4, 23), (1, 4, 8), (5, 20, 8)])
    def test_skills_points_round_half_up(self, matched, required, points):
        baseline = calculate_job_match_score(JobMatchSignals(matched_skills_count=matched, required_skills_count=required))
        assert baseline.breakdown["skills_match"] == points

    @pytest.mark.parametrize("overlap,points", [(62.5, 13), (12.5, 3), (87.5, 18)])
    def test_overlap_points_round_half_up(self, overlap, points):
        baseline = calculate_job_match_score(JobMatchSignals(keyword_overlap_percent=overlap))
        assert baseline.breakdown["keyword_overlap"] == points

    def test_half_points_raise_the_total(self):
        baseline = calculate_job_match_score(JobMatchSignals(
            matched_skills_count=3,
            required_skills_count=4,
            keyword_overlap_percent=62.5,
        ))
        assert baseline.breakdown["skills_match"] == 23
        assert baseline.breakdown["keyword_overlap"] == 13
        assert baseline.score == 64


class TestVariance:
    @pytest.mark.parametrize("baseline,domain,expected", [
        (50, ScoreDomain.RESUME, 12),
        (50, ScoreDomain.JOB_MATCH, 15),
        (40, ScoreDomain.RESUME, 12),
        (60, ScoreDomain.JOB_MATCH, 15),
        (35, ScoreDomain.RESUME, 10),
        (65, ScoreDomain.JOB_MATCH, 10),
        (75, ScoreDomain.RESUME, 10),
        (80, ScoreDomain.RESUME, 10),
        (24, ScoreDomain.RESUME, 7),
        (89, ScoreDomain.RESUME, 7),
    ])
    def test_bands(self, baseline, domain, expected):
        assert calculate_allowed_variance(baseline, domain) == expected

    def test_bounds_stay_within_0_100(self):
        assert score_bounds(95, 7) == (88, 100)
        assert score_bounds(3, 7) == (0, 10)


class TestValidateScore:
    def test_in_range_passes_through(self):
        assert validate_score(50, 43, 15) == 50

    def test_clamps_high(self):
        assert validate_score(70, 43, 15) == 58

    def test_clamps_low(self):
        assert validate_score(10, 43, 15) == 28

    def test_rounds_fractional_scores(self):
        assert validate_score(50.6, 43, 15) == 51

    @pytest.mark.parametrize("proposed,expected", [(50.5, 51), (51.5, 52), (49.4, 49)])
    def test_half_scores_round_up(self, proposed, expected):
        assert validate_score(proposed, 43, 15) == expected

    def test_logs_when_clamping(self, caplog):
        with caplog.at_level("WARNING", logger="services.scoring"):
            validate_score(99, 24, 7)
        assert "above allowed range" in caplog.text
