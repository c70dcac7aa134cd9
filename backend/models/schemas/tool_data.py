"""Deterministic and semantic evidence gathered before the agents run."""

from pydantic import BaseModel


class QuantifiedAchievements(BaseModel):
    count: int = 0
    examples: list[str] = []  # up to 5


class FormattingAnalysis(BaseModel):
    has_bullet_points: bool = False
    has_consistent_spacing: bool = False
    average_line_length: float = 0.0
    section_count: int = 0


class KeywordList(BaseModel):
    keywords: list[str] = []
    count: int = 0


class VerbList(BaseModel):
    verbs: list[str] = []
    count: int = 0


class ToolDataResume(BaseModel):
    """Evidence handed to the resume review agents."""
    quantified_achievements: QuantifiedAchievements = QuantifiedAchievements()
    keywords: KeywordList = KeywordList()
    action_verbs: VerbList = VerbList()
    formatting: FormattingAnalysis = FormattingAnalysis()


class KeywordOverlap(BaseModel):
    overlap_percentage: float = 0.0
    matched_keywords: list[str] = []
    missing_keywords: list[str] = []
    total_job_keywords: int = 0


class RequiredSkills(BaseModel):
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    total_skills: int = 0


class ExperienceSignals(BaseModel):
    resume_years: float = 0.0
    required_years: float = 0.0


class ToolDataJobMatch(BaseModel):
    """Evidence handed to the job-match agents."""
    keyword_overlap: KeywordOverlap = KeywordOverlap()
    resume_keywords: KeywordList = KeywordList()
    job_keywords: KeywordList = KeywordList()
    required_skills: RequiredSkills = RequiredSkills()
    experience: ExperienceSignals = ExperienceSignals()
