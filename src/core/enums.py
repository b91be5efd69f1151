from __future__ import annotations

from enum import Enum


class RunnerState(str, Enum):
    RUNNING = "RUNNING"
    FLUSHING = "FLUSHING"
    COMPLETE = "COMPLETE"


class JobStatus(str, Enum):
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
