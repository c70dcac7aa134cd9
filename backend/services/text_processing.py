"""Shared text normalization, metadata and validation for resumes and job descriptions."""

import html
import re

from models.schemas.preprocessing import (
    PreprocessingError,
    PreprocessingErrorCode,
    TextMetadata,
)

_LI_OPEN_RE = re.compile(r"<li[^>]*>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(r"</(?:li|p|div|h[1-6]|ul|ol|tr)[^>]*>", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_HTML_HINT_RE = re.compile(r"</?[a-zA-Z][^>]*>")

_BULLET_GLYPHS_RE = re.compile(r"[•●○◦▪▸►◆★✦✓✔→‣⁃]")
_DASH_BULLET_RE = re.compile(r"^[-–—]\s", re.MULTILINE)
_STAR_BULLET_RE = re.compile(r"^\*\s", re.MULTILINE)

# Upper-case heading on its own line, optional trailing colon
_HEADING_RE = re.compile(r"^([A-Z][A-Z &\t]+):?[ \t]*$", re.MULTILINE)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
PHONE_RE = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

MAX_CONSECUTIVE_SPECIAL_CHARS = 20
_CORRUPTION_RE = re.compile(rf"[^a-zA-Z0-9\s]{{{MAX_CONSECUTIVE_SPECIAL_CHARS + 1},}}")


def looks_like_html(text: str) -> bool:
    return bool(_HTML_HINT_RE.search(text))


def remove_html_tags(text: str | None) -> str:
    """Strip markup, turning list items into bullets and block closers into newlines."""
    if not text:
        return ""
    text = _LI_OPEN_RE.sub("• ", text)
    text = _BLOCK_CLOSE_RE.sub("\n", text)
    text = _BR_RE.sub("\n", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n\s*\n", "\n", text)
    return text.strip()


def normalize_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def normalize_bullets(text: str) -> str:
    """Unify bullet glyphs and leading dash/star markers to ``•``."""
    text = _BULLET_GLYPHS_RE.sub("•", text)
    text = _DASH_BULLET_RE.sub("• ", text)
    return _STAR_BULLET_RE.sub("• ", text)


def normalize_headings(text: str) -> str:
    """Put upper-case section headings on their own paragraph, without the colon."""
    text = _HEADING_RE.sub(lambda m: f"\n{m.group(1).strip()}\n", text)
    return _EXCESS_NEWLINES_RE.sub("\n\n", text)


def normalize_text(text: str) -> str:
    return normalize_headings(normalize_bullets(normalize_whitespace(text)))


def has_contact_info(text: str) -> bool:
    return bool(EMAIL_RE.search(text) or PHONE_RE.search(text))


def extract_metadata(text: str) -> TextMetadata:
    return TextMetadata(
        character_count=len(text),
        word_count=len(text.split()),
        line_count=len(text.split("\n")),
        has_contact_info=has_contact_info(text),
    )


def validate_text(
    text: str,
    min_chars: int = 200,
    max_chars: int | None = 50000,
    label: str = "Content",
) -> PreprocessingError | None:
    """Generic checks shared by every document kind.

    Checked in order: empty, too short, too long, corrupted. Returns the
    first failure, or None when the text passes.
    """
    if not text or not text.strip():
        return PreprocessingError(
            code=PreprocessingErrorCode.NO_CONTENT,
            message=f"{label} appears to be empty or contains only whitespace",
        )

    if len(text) < min_chars:
        return PreprocessingError(
            code=PreprocessingErrorCode.TOO_SHORT,
            message=(
                f"{label} is too short. Found {len(text)} characters, "
                f"minimum required: {min_chars} characters."
            ),
            details={"character_count": len(text), "min_char_count": min_chars},
        )

    if max_chars is not None and len(text) > max_chars:
        return PreprocessingError(
            code=PreprocessingErrorCode.TOO_LONG,
            message=(
                f"{label} is too long. Found {len(text)} characters, "
                f"maximum allowed: {max_chars} characters."
            ),
            details={"character_count": len(text), "max_char_count": max_chars},
        )

    if _CORRUPTION_RE.search(text):
        return PreprocessingError(
            code=PreprocessingErrorCode.CORRUPTED,
            message=f"{label} appears to be corrupted. Found excessive consecutive special characters.",
            details={"max_consecutive_special_chars": MAX_CONSECUTIVE_SPECIAL_CHARS},
        )

    return None
