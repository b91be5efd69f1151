from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.runner.orchestration.executor import JobResult


class JobListener(Protocol):
    """Вызывается ровно один раз в конце job-а с финальным статусом."""

    async def after_job(self, result: JobResult) -> None:
        ...
