"""Turns extraction and agent failures into progress warnings and user-facing errors."""

import logging
from typing import NoReturn

from services import progress as steps
from services.errors import AIUnavailableError, AnalysisFailedError, is_timeout_error
from services.progress import ProgressStream
from services.scoring import ScoreDomain

logger = logging.getLogger(__name__)

_OPERATION_LABELS = {
    ScoreDomain.RESUME: ("resume analysis", "Resume review"),
    ScoreDomain.JOB_MATCH: ("job matching", "Job match analysis"),
}


def extraction_warning(exc: BaseException) -> str:
    if is_timeout_error(exc):
        return "AI extraction timed out. The model may be slow or unavailable."
    return "AI extraction failed. Please check that the AI service is running."


def handle_extraction_error(
    exc: BaseException, progress: ProgressStream, domain: ScoreDomain
) -> NoReturn:
    operation, _ = _OPERATION_LABELS[domain]
    logger.error("Semantic extraction failed during %s: %s", operation, exc)
    progress.send_warning(steps.TOOL_EXTRACTION, extraction_warning(exc), agent_number=0)
    raise AIUnavailableError(operation, timed_out=is_timeout_error(exc)) from exc


def handle_agent_error(
    exc: BaseException, progress: ProgressStream, domain: ScoreDomain
) -> NoReturn:
    _, label = _OPERATION_LABELS[domain]
    timed_out = is_timeout_error(exc)
    logger.error("%s agents failed: %s", label, exc)

    if timed_out:
        progress.send_warning(
            steps.ANALYSIS_AGENT,
            "Agent timed out. Try a faster model or try again.",
            agent_number=1,
        )
        raise AnalysisFailedError(
            f"{label} timed out. The AI model may be overloaded. Please try again.",
            timed_out=True,
        ) from exc

    progress.send_warning(steps.ANALYSIS_AGENT, f"Agent failed: {exc}", agent_number=1)
    raise AnalysisFailedError(f"{label} failed: {exc}") from exc
