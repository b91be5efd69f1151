from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import LOGGER_NAME
from src.core.enums import JobStatus
from src.models import JobRun

logger = logging.getLogger(LOGGER_NAME)


def _utcnow() -> datetime:
    """UTC без tzinfo, под колонки TIMESTAMP WITHOUT TIME ZONE."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class JobRunsRepo:
    async def next_run_id(self, session: AsyncSession, job_name: str) -> int:
        """RunIdIncrementer: предыдущий max(run_id) + 1, первый запуск получает 1."""
        result = await session.execute(
            select(func.coalesce(func.max(JobRun.run_id), 0)).where(JobRun.job_name == job_name)
        )
        last = result.scalar_one()
        await session.commit()
        return int(last or 0) + 1

    async def start_run(
            self,
            session: AsyncSession,
            *,
            job_name: str,
            run_id: int) -> str:
        stmt = (
            insert(JobRun)
            .values(
                job_name=job_name,
                run_id=run_id,
                status=JobStatus.STARTED.value,
                started_at=_utcnow(),
                read_count=0,
                write_count=0,
                flush_count=0,
            )
            .returning(JobRun.id)
        )
        result = await session.execute(stmt)
        execution_id = str(result.scalar_one())
        await session.commit()
        logger.info("Started job run job=%s run=%d execution=%s",
                    job_name, run_id, execution_id)
        return execution_id

    async def finish_success(
        self,
        session: AsyncSession,
        *,
        execution_id: str,
        read_count: int,
        write_count: int,
        flush_count: int,
    ) -> None:
        stmt = (
            update(JobRun)
            .where(JobRun.id == execution_id)
            .values(
                status=JobStatus.COMPLETED.value,
                finished_at=_utcnow(),
                read_count=read_count,
                write_count=write_count,
                flush_count=flush_count,
            )
        )
        await session.execute(stmt)
        await session.commit()
        logger.info("Finished job run execution=%s COMPLETED (read=%d written=%d flushes=%d)",
                    execution_id, read_count, write_count, flush_count)

    async def finish_failed(
        self,
        session: AsyncSession,
        *,
        execution_id: str,
        error_message: str,
        read_count: int = 0,
        write_count: int = 0,
        flush_count: int = 0,
    ) -> None:
        stmt = (
            update(JobRun)
            .where(JobRun.id == execution_id)
            .values(
                status=JobStatus.FAILED.value,
                finished_at=_utcnow(),
                read_count=read_count,
                write_count=write_count,
                flush_count=flush_count,
                error_message=error_message[:1000],
            )
        )
        await session.execute(stmt)
        await session.commit()
        logger.error("Job run execution=%s FAILED: %s", execution_id, error_message[:300])
