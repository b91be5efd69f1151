from __future__ import annotations

from .enums import JobStatus, RunnerState
from .constants import INSERT_SQL, SOURCE_QUERY

__all__ = [
    "JobStatus",
    "RunnerState",
    "INSERT_SQL",
    "SOURCE_QUERY",
]
