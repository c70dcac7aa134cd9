"""Resume and job description preprocessing.

Each document is converted to text, normalized, measured and validated.
The result is always a ``PreprocessingResult`` value; nothing here raises
to the caller.
"""

import logging
from datetime import date

from models.records import (
    ContactInfo,
    Education,
    JobRecord,
    ResumeRecord,
    ResumeSection,
    SectionType,
    WorkExperience,
)
from models.schemas.preprocessing import (
    PreprocessedText,
    PreprocessingErrorCode,
    PreprocessingResult,
)
from services.text_processing import (
    extract_metadata,
    looks_like_html,
    normalize_text,
    remove_html_tags,
    validate_text,
)

logger = logging.getLogger(__name__)

RESUME_MIN_CHARS = 200
RESUME_MIN_WORDS = 50
RESUME_MAX_WORDS = 10000

JOB_MIN_CHARS = 200
JOB_MAX_CHARS = 50000


# ---------------------------------------------------------------------------
# Record -> text conversion
# ---------------------------------------------------------------------------

def _format_date(value: date) -> str:
    return value.strftime("%b %Y")


def _format_contact(contact: ContactInfo | None) -> str:
    if contact is None:
        return ""
    name = f"{contact.first_name} {contact.last_name}".strip()
    parts = [
        f"Name: {name}" if name else "",
        f"Headline: {contact.headline}" if contact.headline else "",
        f"Email: {contact.email}" if contact.email else "",
        f"Phone: {contact.phone}" if contact.phone else "",
        f"Address: {contact.address}" if contact.address else "",
    ]
    return "\n".join(p for p in parts if p)


def _format_experience(exp: WorkExperience) -> str:
    end = "Present" if exp.current_job or exp.end_date is None else _format_date(exp.end_date)
    desc = remove_html_tags(exp.description)
    parts = [
        f"Company: {exp.company}",
        f"Job Title: {exp.job_title}",
        f"Location: {exp.location}",
        f"Dates: {_format_date(exp.start_date)} - {end}",
        f"Description: {desc}" if desc else "",
    ]
    return "\n".join(p for p in parts if p)


def _format_education(edu: Education) -> str:
    end = _format_date(edu.end_date) if edu.end_date else "Present"
    desc = remove_html_tags(edu.description)
    parts = [
        f"Institution: {edu.institution}",
        f"Degree: {edu.degree}",
        f"Field of Study: {edu.field_of_study}",
        f"Location: {edu.location}",
        f"Dates: {_format_date(edu.start_date)} - {end}",
        f"Description: {desc}" if desc else "",
    ]
    return "\n".join(p for p in parts if p)


def _format_section(section: ResumeSection) -> str:
    if section.section_type == SectionType.SUMMARY:
        content = remove_html_tags(section.summary)
        return f"## SUMMARY\n{content}" if content else ""
    if section.section_type == SectionType.EXPERIENCE:
        content = "\n\n".join(_format_experience(e) for e in section.work_experiences)
        return f"## EXPERIENCE\n{content}" if content else ""
    if section.section_type == SectionType.EDUCATION:
        content = "\n\n".join(_format_education(e) for e in section.educations)
        return f"## EDUCATION\n{content}" if content else ""
    return ""


def resume_to_text(resume: ResumeRecord) -> str:
    """Render a structured resume as markdown-ish plain text."""
    contact = _format_contact(resume.contact_info)
    sections = "\n\n".join(s for s in map(_format_section, resume.sections) if s)
    parts = [
        f"# {resume.title}" if resume.title else "",
        f"## CONTACT\n{contact}" if contact else "",
        sections,
    ]
    return "\n\n".join(p for p in parts if p)


def job_to_text(job: JobRecord) -> str:
    return (
        f"Job Title: {job.title}\n"
        f"Company: {job.company}\n"
        f"Location: {job.location}\n"
        f"Description: {remove_html_tags(job.description)}"
    )


# ---------------------------------------------------------------------------
# Preprocessing entry points
# ---------------------------------------------------------------------------

def _quick_reject(raw_text: str, min_chars: int, label: str) -> PreprocessingResult | None:
    char_count = len(raw_text.strip())
    if char_count == 0:
        return PreprocessingResult.fail(
            PreprocessingErrorCode.NO_CONTENT,
            f"{label} appears to be empty",
            {"character_count": 0},
        )
    if char_count < min_chars:
        return PreprocessingResult.fail(
            PreprocessingErrorCode.TOO_SHORT,
            f"{label} is too short ({char_count} characters, minimum {min_chars} required)",
            {"character_count": char_count},
        )
    return None


def preprocess_resume(resume: ResumeRecord | str) -> PreprocessingResult:
    """Convert, normalize and validate a resume."""
    try:
        raw_text = resume if isinstance(resume, str) else resume_to_text(resume)
        if looks_like_html(raw_text):
            raw_text = remove_html_tags(raw_text)

        rejected = _quick_reject(raw_text, RESUME_MIN_CHARS, "Resume")
        if rejected:
            return rejected

        normalized = normalize_text(raw_text)
        metadata = extract_metadata(normalized)

        error = validate_text(normalized, RESUME_MIN_CHARS, None, "Resume")
        if error is None and metadata.word_count < RESUME_MIN_WORDS:
            return PreprocessingResult.fail(
                PreprocessingErrorCode.TOO_SHORT,
                f"Resume is too short. Found {metadata.word_count} words, minimum required: {RESUME_MIN_WORDS}.",
                {"word_count": metadata.word_count, "min_word_count": RESUME_MIN_WORDS},
            )
        if error is None and metadata.word_count > RESUME_MAX_WORDS:
            return PreprocessingResult.fail(
                PreprocessingErrorCode.TOO_LONG,
                f"Resume contains excessive content. Found {metadata.word_count} words, maximum allowed: {RESUME_MAX_WORDS}.",
                {"word_count": metadata.word_count, "max_word_count": RESUME_MAX_WORDS},
            )
        if error is not None:
            return PreprocessingResult(success=False, error=error)

        return PreprocessingResult.ok(PreprocessedText(normalized_text=normalized, metadata=metadata))
    except Exception as e:
        logger.exception("Resume preprocessing failed")
        return PreprocessingResult.fail(
            PreprocessingErrorCode.PREPROCESSING_ERROR,
            f"Failed to preprocess resume: {e}",
        )


def preprocess_job(job: JobRecord | str) -> PreprocessingResult:
    """Convert, normalize and validate a job description."""
    try:
        raw_text = job if isinstance(job, str) else job_to_text(job)
        if looks_like_html(raw_text):
            raw_text = remove_html_tags(raw_text)

        rejected = _quick_reject(raw_text, JOB_MIN_CHARS, "Job description")
        if rejected:
            return rejected

        normalized = normalize_text(raw_text)
        metadata = extract_metadata(normalized)

        error = validate_text(normalized, JOB_MIN_CHARS, JOB_MAX_CHARS, "Job description")
        if error is not None:
            return PreprocessingResult(success=False, error=error)

        return PreprocessingResult.ok(PreprocessedText(normalized_text=normalized, metadata=metadata))
    except Exception as e:
        logger.exception("Job preprocessing failed")
        return PreprocessingResult.fail(
            PreprocessingErrorCode.PREPROCESSING_ERROR,
            f"Failed to preprocess job description: {e}",
        )
