"""Prompt templates for the semantic extractors and the two agents.

Cloud-tier templates ask for full-detail output; local-tier templates are
short and ask for the simplified shapes in ``models.schemas.local``.
"""

from dataclasses import dataclass, field

from models.schemas.scoring import BaselineScore
from models.schemas.semantic import SemanticData
from models.schemas.tool_data import ToolDataJobMatch, ToolDataResume
from services.scoring import SCORING_GUIDELINES, ScoreDomain

# Characters of document text sent per tier
LOCAL_RESUME_CHARS = 1500
LOCAL_JOB_CHARS = 1200
CLOUD_RESUME_CHARS = 4000
CLOUD_JOB_CHARS = 3500


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "\n[truncated]"


def _bullets(items: list[str], limit: int) -> str:
    return ", ".join(items[:limit]) or "none"


@dataclass
class ResumeAgentContext:
    resume_text: str
    tool_data: ToolDataResume
    baseline: BaselineScore
    min_score: int
    max_score: int

    @property
    def verb_count(self) -> int:
        return self.tool_data.action_verbs.count


@dataclass
class JobMatchAgentContext:
    resume_text: str
    job_text: str
    tool_data: ToolDataJobMatch
    baseline: BaselineScore
    min_score: int
    max_score: int
    semantic: SemanticData = field(default_factory=SemanticData)

    @property
    def verb_count(self) -> int:
        return 0


# ---------------------------------------------------------------------------
# Semantic extraction
# ---------------------------------------------------------------------------

KEYWORD_SYSTEM_PROMPT = (
    "You are an expert technical recruiter. Extract the professional keywords a "
    "modern applicant tracking system would index, grouped by kind. Only list "
    "terms that actually appear in, or are directly evidenced by, the text."
)

VERB_SYSTEM_PROMPT = (
    "You are a resume writing coach. Identify the action verbs that open "
    "accomplishment statements and judge how strong each one is."
)

SKILL_MATCH_SYSTEM_PROMPT = (
    "You are a senior technical recruiter. Compare the candidate's skills with "
    "the job requirements semantically: exact matches, related or transferable "
    "skills, and genuinely missing skills."
)

SIMILARITY_SYSTEM_PROMPT = (
    "You are a hiring manager. Judge how well this candidate fits the role overall, "
    "looking past exact wording to the substance of their experience."
)

LOCAL_KEYWORD_SYSTEM_PROMPT = "List the technical skills and tools in this text."
LOCAL_VERB_SYSTEM_PROMPT = "List strong and weak action verbs in this resume."
LOCAL_SKILL_MATCH_SYSTEM_PROMPT = "Compare the resume skills with the job requirements."
LOCAL_SIMILARITY_SYSTEM_PROMPT = "Rate how well the resume fits the job from 0 to 100."


def build_keyword_prompt(text: str, context_hint: str | None = None) -> str:
    hint = f"\nContext: {context_hint}\n" if context_hint else ""
    return f"""Extract keywords from the text below.
{hint}
Group them into technical_skills, tools_platforms, methodologies,
domain_knowledge and soft_skills. Set total_count to the number of
distinct keywords across all groups.

TEXT:
---
{_truncate(text, CLOUD_RESUME_CHARS)}
---"""


def build_local_keyword_prompt(text: str, context_hint: str | None = None) -> str:
    return f"""List technical_skills and tools found in this text. total_count = number listed.

{_truncate(text, LOCAL_RESUME_CHARS)}"""


def build_verb_prompt(resume_text: str) -> str:
    return f"""Analyze the action verbs in this resume.

For each strong verb give the verb, the phrase it appears in, and impact_level
("high" or "medium"). For each weak verb or phrase ("helped", "worked on",
"responsible for") give the verb, its context and a stronger suggestion.
Rate overall verb_strength_score from 0 to 10.

RESUME:
---
{_truncate(resume_text, CLOUD_RESUME_CHARS)}
---"""


def build_local_verb_prompt(resume_text: str) -> str:
    return f"""List strong_verbs and weak_verbs used in this resume, and a verb_strength_score from 0 to 10.

{_truncate(resume_text, LOCAL_RESUME_CHARS)}"""


def build_skill_match_prompt(resume_text: str, job_text: str) -> str:
    return f"""Match the candidate's skills to this job.

- exact_matches: skill, resume_evidence (quote), job_requirement (quote)
- related_matches: job_skill, resume_skill, similarity (0-100), explanation
- missing_skills: skill, importance ("critical" | "important" | "nice-to-have"),
  learnability ("quick" | "moderate" | "significant")
- overall_match_percentage: 0-100

A skill must not be both matched and missing.

RESUME:
---
{_truncate(resume_text, CLOUD_RESUME_CHARS)}
---

JOB DESCRIPTION:
---
{_truncate(job_text, CLOUD_JOB_CHARS)}
---"""


def build_local_skill_match_prompt(resume_text: str, job_text: str) -> str:
    return f"""List matched_skills (skill + evidence from resume), missing_skills, and match_percentage (0-100).

Resume:
{_truncate(resume_text, LOCAL_RESUME_CHARS)}

Job:
{_truncate(job_text, LOCAL_JOB_CHARS)}"""


def build_similarity_prompt(resume_text: str, job_text: str) -> str:
    return f"""Assess the overall fit between this resume and job.

Return similarity_score (0-100), a short match_explanation, key_matches,
key_gaps (skill + note), transferable_skills (resume_skill, job_skill,
how_it_transfers) and an application_recommendation.

RESUME:
---
{_truncate(resume_text, CLOUD_RESUME_CHARS)}
---

JOB DESCRIPTION:
---
{_truncate(job_text, CLOUD_JOB_CHARS)}
---"""


def build_local_similarity_prompt(resume_text: str, job_text: str) -> str:
    return f"""Give similarity_score (0-100), a one-sentence match_explanation, and up to 3 key_gaps.

Resume:
{_truncate(resume_text, LOCAL_RESUME_CHARS)}

Job:
{_truncate(job_text, LOCAL_JOB_CHARS)}"""


# ---------------------------------------------------------------------------
# Resume review agents
# ---------------------------------------------------------------------------

RESUME_ANALYSIS_SYSTEM_PROMPT = f"""You are the Analysis Agent in a resume review team.
You receive a deterministic baseline score computed from measured signals.
Your final_score MUST stay inside the allowed range you are given; explain
every adjustment against the baseline in adjustments and math.
{SCORING_GUIDELINES[ScoreDomain.RESUME]}"""

RESUME_FEEDBACK_SYSTEM_PROMPT = """You are the Feedback Agent in a resume review team.
Write specific, evidence-based strengths, weaknesses and actionable suggestions.
Quote the resume where possible. Do not restate the score."""

LOCAL_RESUME_ANALYSIS_SYSTEM_PROMPT = "You are a resume scorer. Stay within the given score range."
LOCAL_RESUME_FEEDBACK_SYSTEM_PROMPT = "You are a resume coach. Give strengths, weaknesses, and suggestions."


def _resume_evidence(tool_data: ToolDataResume) -> str:
    fmt = tool_data.formatting
    return f"""- Quantified achievements: {tool_data.quantified_achievements.count} (e.g. {_bullets(tool_data.quantified_achievements.examples, 5)})
- Keywords: {tool_data.keywords.count} ({_bullets(tool_data.keywords.keywords, 15)})
- Strong action verbs: {tool_data.action_verbs.count} ({_bullets(tool_data.action_verbs.verbs, 10)})
- Bullet points: {"yes" if fmt.has_bullet_points else "no"}, sections: {fmt.section_count}, average line length: {fmt.average_line_length}"""


def build_resume_analysis_prompt(ctx: ResumeAgentContext) -> str:
    return f"""BASELINE SCORE: {ctx.baseline.score}/100
BREAKDOWN: {ctx.baseline.breakdown}
ALLOWED RANGE: {ctx.min_score}-{ctx.max_score}

MEASURED SIGNALS:
{_resume_evidence(ctx.tool_data)}

Review the resume, decide the final_score within the allowed range, fill
data_insights from the measured signals, and give keyword_analysis with up
to 5 missing_critical keywords and up to 3 recommendations.

RESUME:
---
{_truncate(ctx.resume_text, CLOUD_RESUME_CHARS)}
---"""


def build_resume_feedback_prompt(ctx: ResumeAgentContext) -> str:
    return f"""The resume scored {ctx.baseline.score}/100 on measured signals.

MEASURED SIGNALS:
{_resume_evidence(ctx.tool_data)}

Give 3-5 strengths, 3-5 weaknesses, 3-5 suggestions and brief synthesis_notes.

RESUME:
---
{_truncate(ctx.resume_text, CLOUD_RESUME_CHARS)}
---"""


def build_local_resume_analysis_prompt(ctx: ResumeAgentContext) -> str:
    return f"""Score this resume. Baseline: {ctx.baseline.score}, range: {ctx.min_score}-{ctx.max_score}.
Quantified achievements: {ctx.tool_data.quantified_achievements.count}. Keywords: {ctx.tool_data.keywords.count}.

{_truncate(ctx.resume_text, LOCAL_RESUME_CHARS)}"""


def build_local_resume_feedback_prompt(ctx: ResumeAgentContext) -> str:
    return f"""Give up to 3 strengths, 3 weaknesses, 3 suggestions and a one-sentence summary. Score: {ctx.baseline.score}.

{_truncate(ctx.resume_text, LOCAL_RESUME_CHARS)}"""


# ---------------------------------------------------------------------------
# Job-match agents
# ---------------------------------------------------------------------------

JOB_MATCH_ANALYSIS_SYSTEM_PROMPT = f"""You are the Analysis Agent in a job matching team.
You receive a deterministic baseline match score and semantic skill evidence.
Your final_score MUST stay inside the allowed range you are given; explain
every adjustment against the baseline.
{SCORING_GUIDELINES[ScoreDomain.JOB_MATCH]}"""

JOB_MATCH_FEEDBACK_SYSTEM_PROMPT = """You are the Feedback Agent in a job matching team.
Explain where the candidate fits the role, where they fall short and what to
do before applying. Be concrete and reference both documents."""

LOCAL_JOB_MATCH_ANALYSIS_SYSTEM_PROMPT = "You are a job match analyzer. Score how well the resume matches the job."
LOCAL_JOB_MATCH_FEEDBACK_SYSTEM_PROMPT = "You are a job match expert. Provide strengths, gaps, and suggestions."


def _job_match_evidence(ctx: JobMatchAgentContext) -> str:
    overlap = ctx.tool_data.keyword_overlap
    lines = [
        f"- Matched skills: {_bullets(overlap.matched_keywords, 12)}",
        f"- Missing skills: {_bullets(overlap.missing_keywords, 12)}",
        f"- Overlap: {overlap.overlap_percentage:.0f}%",
        f"- Experience: {ctx.tool_data.experience.resume_years} years (required {ctx.tool_data.experience.required_years})",
    ]
    explanation = ctx.semantic.match_explanation
    if explanation:
        lines.append(f"- Fit assessment: {explanation.fit_assessment}")
        lines.extend(f"- {item}" for item in explanation.gaps_explanation)
    return "\n".join(lines)


def build_job_match_analysis_prompt(ctx: JobMatchAgentContext) -> str:
    return f"""BASELINE SCORE: {ctx.baseline.score}/100
BREAKDOWN: {ctx.baseline.breakdown}
ALLOWED RANGE: {ctx.min_score}-{ctx.max_score}

EVIDENCE:
{_job_match_evidence(ctx)}

Decide the final_score within the allowed range and give keyword_analysis
with up to 5 missing_critical skills and up to 3 recommendations.

RESUME:
---
{_truncate(ctx.resume_text, CLOUD_RESUME_CHARS)}
---

JOB DESCRIPTION:
---
{_truncate(ctx.job_text, CLOUD_JOB_CHARS)}
---"""


def build_job_match_feedback_prompt(ctx: JobMatchAgentContext) -> str:
    return f"""The match scored {ctx.baseline.score}/100 on measured signals.

EVIDENCE:
{_job_match_evidence(ctx)}

Give 3-5 strengths, 3-5 weaknesses (gaps), 3-5 suggestions and brief synthesis_notes.

RESUME:
---
{_truncate(ctx.resume_text, CLOUD_RESUME_CHARS)}
---

JOB DESCRIPTION:
---
{_truncate(ctx.job_text, CLOUD_JOB_CHARS)}
---"""


def build_local_job_match_analysis_prompt(ctx: JobMatchAgentContext) -> str:
    overlap = ctx.tool_data.keyword_overlap
    return f"""Score this resume-job match. Baseline: {ctx.baseline.score}, range: {ctx.min_score}-{ctx.max_score}.

Resume:
{_truncate(ctx.resume_text, LOCAL_RESUME_CHARS)}

Job:
{_truncate(ctx.job_text, LOCAL_JOB_CHARS)}

Matched skills: {_bullets(overlap.matched_keywords, 8)}
Missing skills: {_bullets(overlap.missing_keywords, 8)}"""


def build_local_job_match_feedback_prompt(ctx: JobMatchAgentContext) -> str:
    overlap = ctx.tool_data.keyword_overlap
    return f"""Give feedback on this resume-job match. Score: {ctx.baseline.score}.

Resume:
{_truncate(ctx.resume_text, LOCAL_RESUME_CHARS)}

Job:
{_truncate(ctx.job_text, LOCAL_JOB_CHARS)}

Matched: {_bullets(overlap.matched_keywords, 5)}
Missing: {_bullets(overlap.missing_keywords, 5)}"""
