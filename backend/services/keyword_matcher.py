"""Deterministic keyword overlap between a resume and a job description.

Used when semantic extraction is unavailable and degraded job matching is
enabled. Job keywords come from a curated skill dictionary; resume matching
goes through synonym resolution and then rapidfuzz fuzzy matching.
"""

import logging
import re

from rapidfuzz import fuzz

from models.schemas.tool_data import (
    KeywordList,
    KeywordOverlap,
    RequiredSkills,
    ToolDataJobMatch,
)

logger = logging.getLogger(__name__)

# Aliases -> canonical skill name
SKILL_SYNONYMS: dict[str, str] = {
    "js": "javascript", "es6": "javascript", "ts": "typescript",
    "reactjs": "react", "react.js": "react",
    "vuejs": "vue", "vue.js": "vue",
    "angularjs": "angular",
    "node": "node.js", "nodejs": "node.js",
    "nextjs": "next.js",
    "python3": "python",
    "sklearn": "scikit-learn",
    "torch": "pytorch",
    "k8s": "kubernetes",
    "amazon web services": "aws",
    "google cloud": "gcp", "google cloud platform": "gcp",
    "microsoft azure": "azure",
    "cicd": "ci/cd",
    "postgres": "postgresql",
    "mongo": "mongodb",
    "mssql": "sql server",
    "csharp": "c#", "cpp": "c++",
    "golang": "go",
    "ml": "machine learning",
    "nlp": "natural language processing",
    "genai": "generative ai",
    "large language models": "llm",
    "restful": "rest", "rest api": "rest", "rest apis": "rest",
    "agile/scrum": "agile",
}

SKILL_DICTIONARY: frozenset[str] = frozenset({
    # Languages
    "python", "javascript", "typescript", "java", "c++", "c#", "go", "rust",
    "ruby", "php", "swift", "kotlin", "scala", "sql",
    # Web
    "react", "angular", "vue", "next.js", "html", "css", "tailwind",
    "node.js", "express", "fastapi", "django", "flask", "spring", "rails",
    ".net", "graphql", "rest", "grpc",
    # Cloud and delivery
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "ansible",
    "jenkins", "github actions", "ci/cd", "linux",
    # Data
    "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "kafka",
    "spark", "snowflake", "bigquery", "pandas", "sql server",
    # ML
    "machine learning", "deep learning", "tensorflow", "pytorch",
    "natural language processing", "scikit-learn", "llm", "generative ai",
    # Practices
    "agile", "scrum", "kanban", "leadership", "communication",
    "project management", "microservices", "testing",
})

FUZZY_THRESHOLD = 80
_SHORT_TERM_LEN = 3


def _normalize(text: str) -> str:
    # Drop sentence periods but keep dots inside terms like "node.js"
    text = re.sub(r"\.(\s|$)", " ", text.lower())
    return re.sub(r"[^a-z0-9.#+/ -]", " ", text)


def _canonicalize(term: str) -> str:
    lower = term.lower().strip()
    return SKILL_SYNONYMS.get(lower, lower)


def _extract_terms(text: str) -> set[str]:
    """Unigrams, bigrams and trigrams of the normalized text, canonicalized."""
    words = _normalize(text).split()
    terms: set[str] = set(words)
    for n in (2, 3):
        for i in range(len(words) - n + 1):
            terms.add(" ".join(words[i:i + n]))
    return terms | {_canonicalize(t) for t in terms}


def extract_job_keywords(job_text: str) -> list[str]:
    """Dictionary skills mentioned by the job description, sorted."""
    terms = _extract_terms(job_text)
    return sorted(kw for kw in SKILL_DICTIONARY if kw in terms)


def _matches(keyword: str, resume_terms: set[str]) -> bool:
    canonical = _canonicalize(keyword)
    if canonical in resume_terms:
        return True
    if len(canonical) < _SHORT_TERM_LEN:
        return False
    return any(
        len(term) >= _SHORT_TERM_LEN and fuzz.ratio(canonical, term) >= FUZZY_THRESHOLD
        for term in resume_terms
    )


def match_keywords(resume_text: str, job_keywords: list[str]) -> tuple[list[str], list[str]]:
    """Split job keywords into (matched, missing) against the resume."""
    resume_terms = _extract_terms(resume_text)
    matched: list[str] = []
    missing: list[str] = []
    for kw in job_keywords:
        (matched if _matches(kw, resume_terms) else missing).append(kw)
    return matched, missing


def build_keyword_tool_data(resume_text: str, job_text: str) -> ToolDataJobMatch:
    """Job-match evidence from keyword overlap alone."""
    job_keywords = extract_job_keywords(job_text)
    matched, missing = match_keywords(resume_text, job_keywords)
    overlap = len(matched) / len(job_keywords) * 100 if job_keywords else 0.0
    resume_terms = _extract_terms(resume_text)
    resume_keywords = sorted(kw for kw in SKILL_DICTIONARY if kw in resume_terms)

    logger.info(
        "Keyword overlap: %d/%d job keywords matched (%.0f%%)",
        len(matched), len(job_keywords), overlap,
    )

    return ToolDataJobMatch(
        keyword_overlap=KeywordOverlap(
            overlap_percentage=round(overlap, 1),
            matched_keywords=matched,
            missing_keywords=missing,
            total_job_keywords=len(job_keywords),
        ),
        resume_keywords=KeywordList(keywords=resume_keywords, count=len(resume_keywords)),
        job_keywords=KeywordList(keywords=job_keywords, count=len(job_keywords)),
        required_skills=RequiredSkills(required_skills=job_keywords, total_skills=len(job_keywords)),
    )
