from __future__ import annotations

from dataclasses import dataclass

from src.runner.services.logctx import ctx_prefix


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    job_name: str
    run_id: int
    execution_id: str

    @property
    def prefix(self) -> str:
        return ctx_prefix(job=self.job_name, run=self.run_id, execution=self.execution_id)
