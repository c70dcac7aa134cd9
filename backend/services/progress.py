"""Progress reporting for long-running analyses.

Pipelines report through a ``ProgressStream``; where the events go (an SSE
queue, a log, nowhere) is up to the sink the caller provides.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable

from models.schemas.progress import ProgressStatus, ProgressUpdate

logger = logging.getLogger(__name__)

ProgressSink = Callable[[ProgressUpdate], None]


@dataclass(frozen=True)
class StepInfo:
    name: str
    description: str
    estimated_duration_ms: int


TOOL_EXTRACTION = "tool-extraction"
ANALYSIS_AGENT = "analysis-agent"
FEEDBACK_AGENT = "feedback-agent"
VALIDATION = "validation"
COMPLETE = "complete"

AGENT_STEPS: dict[str, StepInfo] = {
    TOOL_EXTRACTION: StepInfo(
        "Data Extraction",
        "Extracting keywords, action verbs and other signals",
        2000,
    ),
    ANALYSIS_AGENT: StepInfo(
        "Analysis Agent",
        "Calculating the score against the baseline",
        15000,
    ),
    FEEDBACK_AGENT: StepInfo(
        "Feedback Agent",
        "Writing strengths, weaknesses and suggestions",
        15000,
    ),
    VALIDATION: StepInfo("Validation", "Checking the score against the allowed range", 500),
    COMPLETE: StepInfo("Complete", "Analysis finished", 0),
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def encode_progress_message(update: ProgressUpdate) -> str:
    """Frame an update as a Server-Sent Events data message."""
    return f"data: {update.model_dump_json(exclude_none=True)}\n\n"


def encode_event(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


class ProgressStream:
    def __init__(self, sink: ProgressSink | None = None):
        self._sink = sink

    @classmethod
    def queue_sink(cls, queue: asyncio.Queue) -> "ProgressStream":
        return cls(queue.put_nowait)

    def _emit(self, update: ProgressUpdate) -> None:
        if self._sink is None:
            return
        try:
            self._sink(update)
        except Exception:
            # A closed or broken consumer must not fail the analysis
            logger.debug("Progress sink rejected %s/%s", update.step, update.status, exc_info=True)

    def send_started(self, step: str, agent_number: int | None = None) -> None:
        info = AGENT_STEPS.get(step)
        self._emit(ProgressUpdate(
            step=step,
            status=ProgressStatus.STARTED,
            message=f"{info.name}: {info.description}" if info else step,
            timestamp=_now_ms(),
            agent_number=agent_number,
            estimated_duration_ms=info.estimated_duration_ms if info else None,
        ))

    def send_completed(self, step: str, agent_number: int | None = None) -> None:
        info = AGENT_STEPS.get(step)
        self._emit(ProgressUpdate(
            step=step,
            status=ProgressStatus.COMPLETED,
            message=f"{info.name} completed" if info else f"{step} completed",
            timestamp=_now_ms(),
            agent_number=agent_number,
        ))

    def send_warning(self, step: str, message: str, agent_number: int | None = None) -> None:
        self._emit(ProgressUpdate(
            step=step,
            status=ProgressStatus.WARNING,
            message=message,
            timestamp=_now_ms(),
            agent_number=agent_number,
        ))
