from __future__ import annotations

import asyncio
import logging
import sys

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config import JobConfig, Settings, get_settings
from src.core.constants import LOGGER_NAME
from src.core.enums import JobStatus
from src.core.exceptions import JobError
from src.db import create_engine, create_session_factory
from src.runner.listeners import LoggingCompletionListener
from src.runner.orchestration.executor import JobExecutor, JobParameters
from src.runner.repos.runs import JobRunsRepo
from src.runner.services.db_errors import is_db_disconnect

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] [job] %(message)s",
    )


async def wait_for_db(
    engine: AsyncEngine,
    *,
    attempts: int = 10,
    delays: tuple[float, ...] = (1, 2, 4, 8, 8, 8, 8, 8, 8, 8),
) -> None:
    """
    Ждём пока БД поднимется. Если не поднялась за attempts - падаем.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    last_exc: Exception | None = None

    for i in range(1, attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("DB connection OK")
            return
        except Exception as exc:
            if not is_db_disconnect(exc):
                raise
            last_exc = exc
            delay = delays[i - 1] if i - 1 < len(delays) else delays[-1]
            logger.warning("DB not ready (%d/%d). Retrying in %ss...", i, attempts, delay)
            await asyncio.sleep(delay)

    logger.error("DB did not become ready after %d attempts", attempts)
    raise last_exc  # type: ignore[misc]


async def run_job(settings: Settings | None = None) -> JobStatus:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    config = JobConfig.from_settings(settings)
    logger.info("Batch job %s starting up (chunk_size=%d)...", config.job_name, config.chunk_size)

    engine = create_engine(settings)
    try:
        await wait_for_db(engine)
        session_factory = create_session_factory(engine)

        executor = JobExecutor(
            session_factory=session_factory,
            config=config,
            runs=JobRunsRepo(),
            listener=LoggingCompletionListener(session_factory),
        )
        try:
            result = await executor.execute(JobParameters(run_id=settings.run_id))
        except JobError:
            # подробности уже в логе executor-а и listener-а
            return JobStatus.FAILED
        except Exception:
            logger.exception("Batch job %s aborted", config.job_name)
            return JobStatus.FAILED
        return result.status
    finally:
        await engine.dispose()


def main() -> int:
    status = asyncio.run(run_job())
    return 0 if status == JobStatus.COMPLETED else 1


if __name__ == "__main__":
    sys.exit(main())
