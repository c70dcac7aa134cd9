"""Preprocessing outcome: normalized text plus metadata, or a coded error."""

from enum import Enum

from pydantic import BaseModel


class PreprocessingErrorCode(str, Enum):
    NO_CONTENT = "NO_CONTENT"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    CORRUPTED = "CORRUPTED"
    PREPROCESSING_ERROR = "PREPROCESSING_ERROR"


class TextMetadata(BaseModel):
    """Counts taken from the normalized text."""
    character_count: int = 0
    word_count: int = 0
    line_count: int = 0
    has_contact_info: bool = False


class PreprocessingError(BaseModel):
    code: PreprocessingErrorCode
    message: str
    details: dict[str, int] = {}


class PreprocessedText(BaseModel):
    normalized_text: str
    metadata: TextMetadata
    is_valid: bool = True


class PreprocessingResult(BaseModel):
    """Either ``data`` (success) or ``error`` (failure) is set, never both."""
    success: bool
    data: PreprocessedText | None = None
    error: PreprocessingError | None = None

    @classmethod
    def ok(cls, data: PreprocessedText) -> "PreprocessingResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        code: PreprocessingErrorCode,
        message: str,
        details: dict[str, int] | None = None,
    ) -> "PreprocessingResult":
        return cls(
            success=False,
            error=PreprocessingError(code=code, message=message, details=details or {}),
        )
