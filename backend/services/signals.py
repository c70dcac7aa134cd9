"""Deterministic resume signals: quantified achievements and formatting."""

import re

from models.schemas.tool_data import FormattingAnalysis, QuantifiedAchievements

BULLET_MARKERS = ("•", "-", "*")

# Evidence of measurable impact
ACHIEVEMENT_PATTERNS: list[re.Pattern] = [
    re.compile(r"\d+%", re.IGNORECASE),
    re.compile(r"\$[\d,]+[KMB]?", re.IGNORECASE),
    re.compile(r"\d+\+?\s*(?:years?|months?|weeks?)", re.IGNORECASE),
    re.compile(r"(?:increased|decreased|improved|reduced|grew|boosted)\s+by\s+\d+", re.IGNORECASE),
    re.compile(r"\d+x\s+(?:faster|better|more)", re.IGNORECASE),
    re.compile(r"team\s+of\s+\d+", re.IGNORECASE),
    re.compile(r"\d+\s+(?:clients?|customers?|users?|projects?)", re.IGNORECASE),
]

MAX_ACHIEVEMENT_EXAMPLES = 5
MIN_BULLET_LINES = 3


def count_quantified_achievements(text: str) -> QuantifiedAchievements:
    """Count distinct quantified phrases (percentages, money, durations, team sizes...)."""
    found: dict[str, None] = {}
    for pattern in ACHIEVEMENT_PATTERNS:
        for match in pattern.finditer(text):
            found.setdefault(match.group(0), None)

    examples = list(found)
    return QuantifiedAchievements(count=len(examples), examples=examples[:MAX_ACHIEVEMENT_EXAMPLES])


def _is_section_header(line: str) -> bool:
    if line.endswith(":"):
        return True
    return line == line.upper() and any(c.isalpha() for c in line)


def analyze_formatting(text: str) -> FormattingAnalysis:
    lines = [line.strip() for line in text.split("\n")]
    non_empty = [line for line in lines if line]

    bullet_lines = sum(1 for line in non_empty if line.startswith(BULLET_MARKERS))
    section_count = sum(1 for line in non_empty if _is_section_header(line))
    average_line_length = (
        sum(len(line) for line in non_empty) / len(non_empty) if non_empty else 0.0
    )

    return FormattingAnalysis(
        has_bullet_points=bullet_lines > MIN_BULLET_LINES,
        has_consistent_spacing=20 < average_line_length < 100,
        average_line_length=round(average_line_length, 1),
        section_count=section_count,
    )
