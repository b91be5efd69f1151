from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.constants import LOGGER_NAME
from src.core.enums import JobStatus
from src.models import WriterRow
from src.runner.orchestration.executor import JobResult

logger = logging.getLogger(LOGGER_NAME)


class LoggingCompletionListener:
    """После job-а пишет финальный статус в лог, при успехе перечитывает writer."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def after_job(self, result: JobResult) -> None:
        stats = result.stats

        if result.status != JobStatus.COMPLETED:
            logger.error(
                "JOB %s run=%s FAILED (read=%d written=%d flushes=%d): %r",
                result.job_name,
                result.run_id,
                stats.read_count,
                stats.write_count,
                stats.flush_count,
                result.error,
            )
            return

        logger.info(
            "JOB %s run=%s FINISHED! read=%d written=%d flushes=%d. Time to verify the results",
            result.job_name,
            result.run_id,
            stats.read_count,
            stats.write_count,
            stats.flush_count,
        )

        async with self._session_factory() as session:
            rows = (await session.execute(select(WriterRow).order_by(WriterRow.id))).scalars().all()

        for row in rows:
            logger.info("Found <%r> in the database.", row)
