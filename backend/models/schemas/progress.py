"""Progress events streamed to clients while an analysis runs."""

from enum import Enum

from pydantic import BaseModel


class ProgressStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    WARNING = "warning"


class ProgressUpdate(BaseModel):
    step: str
    status: ProgressStatus
    message: str
    timestamp: int  # epoch milliseconds
    agent_number: int | None = None
    estimated_duration_ms: int | None = None
