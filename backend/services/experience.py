"""Years-of-experience signals for job matching."""

import re
from datetime import date

# "5+ years of experience" or "3 years experience in Python"
EXP_YEARS_RE = re.compile(
    r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s+)?(?:(?:professional|relevant|hands-on|industry)\s+)?(?:experience|exp\b)",
    re.IGNORECASE,
)

# Date ranges: "Jan 2019 - Present", "2020 - 2023", "March 2018 – Nov 2022"
_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|"
    r"Jul(?:y)?|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
DATE_RANGE_RE = re.compile(
    rf"({_MONTHS}\.?\s*\d{{4}}|\b\d{{4}})"
    r"\s*(?:-|–|—|to)\s*"
    rf"({_MONTHS}\.?\s*\d{{4}}|\d{{4}}\b|present|current)",
    re.IGNORECASE,
)

_MONTH_MAP = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "sept": 9,
    "september": 9, "oct": 10, "october": 10, "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

MAX_CAREER_MONTHS = 600


def _parse_date(date_str: str, today: date) -> tuple[int, int]:
    """Parse a date string into (year, month). Returns (0, 0) when unparseable."""
    date_str = date_str.strip().rstrip(".")
    if date_str.lower() in ("present", "current"):
        return today.year, today.month

    parts = date_str.split()
    if len(parts) == 2:
        month = _MONTH_MAP.get(parts[0].lower().rstrip("."))
        if month and parts[1].isdigit():
            return int(parts[1]), month

    if date_str.isdigit():
        year = int(date_str)
        if 1970 <= year <= 2100:
            return year, 1

    return 0, 0


def extract_experience_years(text: str, today: date | None = None) -> float:
    """Estimate total years of experience from resume text.

    Takes the larger of the highest explicit claim ("5+ years of experience")
    and the sum of all role date ranges.
    """
    today = today or date.today()

    explicit_years = extract_required_years(text)

    total_months = 0
    for match in DATE_RANGE_RE.finditer(text):
        start_year, start_month = _parse_date(match.group(1), today)
        end_year, end_month = _parse_date(match.group(2), today)
        if start_year and end_year:
            months = (end_year - start_year) * 12 + (end_month - start_month)
            if 0 < months < MAX_CAREER_MONTHS:
                total_months += months

    date_years = round(total_months / 12, 1) if total_months > 0 else 0.0
    return max(explicit_years, date_years)


def extract_required_years(job_description: str) -> float:
    """Highest "N years of experience" figure in the text, or 0."""
    best = 0.0
    for match in EXP_YEARS_RE.finditer(job_description):
        years = float(match.group(1))
        if years > best and years < 60:
            best = years
    return best
