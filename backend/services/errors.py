"""Exception types for LLM-backed analysis.

Every AI failure carries a ``timed_out`` tag so callers can tell a deadline
expiry from any other failure without parsing messages.
"""


class AIServiceError(Exception):
    """Base class for failures talking to, or interpreting, an LLM."""

    timed_out: bool = False

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.operation = operation


class LLMProviderError(AIServiceError):
    """The provider call failed or its output did not match the requested schema."""


class LLMTimeoutError(AIServiceError):
    timed_out = True

    def __init__(self, operation: str, timeout_ms: int):
        super().__init__(f"{operation} timed out after {timeout_ms}ms", operation)
        self.timeout_ms = timeout_ms


class RetryExhaustedError(AIServiceError):
    def __init__(self, operation: str, attempts: int, last_error: BaseException):
        super().__init__(f"{operation} failed after {attempts} attempts: {last_error}", operation)
        self.attempts = attempts
        self.last_error = last_error
        self.timed_out = is_timeout_error(last_error)


class AIUnavailableError(AIServiceError):
    """Semantic extraction could not be completed."""

    def __init__(self, operation: str, timed_out: bool = False):
        super().__init__(f"AI unavailable for {operation}. Please try again later.", operation)
        self.timed_out = timed_out


class AnalysisFailedError(Exception):
    """An agent phase failed; the message is safe to show to users."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


def is_timeout_error(exc: BaseException) -> bool:
    if getattr(exc, "timed_out", False):
        return True
    return "timed out" in str(exc).lower()
