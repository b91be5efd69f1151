from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config import JobConfig
from src.core.constants import LOGGER_NAME
from src.core.enums import JobStatus
from src.runner.adapters.readers import CursorRecordReader
from src.runner.adapters.transformers import RecordTransformer
from src.runner.adapters.uow import SessionUnitOfWork
from src.runner.adapters.writers import BatchInsertWriter
from src.runner.orchestration.chunk_runner import ChunkRunner, ChunkStats
from src.runner.orchestration.context import ExecutionContext
from src.runner.ports.listener import JobListener
from src.runner.ports.transform import Transformer
from src.runner.repos.runs import JobRunsRepo
from src.runner.services.db_errors import is_db_disconnect
from src.runner.services.logctx import ctx_prefix

logger = logging.getLogger(LOGGER_NAME)

EMPTY_STATS = ChunkStats(read_count=0, write_count=0, flush_count=0, skip_count=0)


@dataclass(frozen=True, slots=True)
class JobParameters:
    # None -> следующий run_id из batch_job_runs
    run_id: int | None = None


@dataclass(frozen=True, slots=True)
class JobResult:
    job_name: str
    run_id: int
    status: JobStatus
    stats: ChunkStats
    error: BaseException | None = None


class JobExecutor:
    """Один запуск job-а: run_id -> run в истории -> chunk-цикл -> финальный статус -> callback."""

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        config: JobConfig,
        runs: JobRunsRepo,
        listener: JobListener,
        transformer: Transformer | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._config = config
        self._runs = runs
        self._listener = listener
        self._transformer = transformer or RecordTransformer()

    async def execute(self, params: JobParameters | None = None) -> JobResult:
        params = params or JobParameters()
        job_name = self._config.job_name

        async with self._session_factory() as session:
            run_id = params.run_id
            execution_id: str | None = None
            prefix = ctx_prefix(job=job_name, run=run_id if run_id is not None else "?")
            result = JobResult(job_name=job_name, run_id=run_id or 0, status=JobStatus.FAILED, stats=EMPTY_STATS)
            runner: ChunkRunner | None = None

            try:
                if run_id is None:
                    run_id = await self._runs.next_run_id(session, job_name)
                execution_id = await self._runs.start_run(session, job_name=job_name, run_id=run_id)

                ctx = ExecutionContext(job_name=job_name, run_id=run_id, execution_id=execution_id)
                prefix = ctx.prefix

                # один курсор на чтение и одно соединение на запись на весь job
                async with self._session_factory() as read_session, \
                        self._session_factory() as write_session:
                    reader = CursorRecordReader(read_session)
                    await reader.open()
                    try:
                        runner = ChunkRunner(
                            reader=reader,
                            transformer=self._transformer,
                            writer=BatchInsertWriter(),
                            uow=SessionUnitOfWork(write_session),
                            config=self._config,
                            ctx=prefix,
                        )
                        stats = await runner.run()
                    finally:
                        await reader.close()

                await self._runs.finish_success(
                    session,
                    execution_id=execution_id,
                    read_count=stats.read_count,
                    write_count=stats.write_count,
                    flush_count=stats.flush_count,
                )
                result = JobResult(
                    job_name=job_name,
                    run_id=run_id,
                    status=JobStatus.COMPLETED,
                    stats=stats,
                )
                return result

            except Exception as exc:
                stats = runner.stats() if runner is not None else EMPTY_STATS
                result = JobResult(
                    job_name=job_name,
                    run_id=run_id or 0,
                    status=JobStatus.FAILED,
                    stats=stats,
                    error=exc,
                )

                if is_db_disconnect(exc):
                    logger.warning(
                        "%s DB disconnected during job. Run stays STARTED. err=%r",
                        prefix, exc,
                    )
                    raise

                logger.exception("%s job FAILED after %d flush(es)", prefix, stats.flush_count)
                # run не создан - обновлять в batch_job_runs нечего
                if execution_id is not None:
                    await session.rollback()
                    await self._runs.finish_failed(
                        session,
                        execution_id=execution_id,
                        error_message=repr(exc),
                        read_count=stats.read_count,
                        write_count=stats.write_count,
                        flush_count=stats.flush_count,
                    )
                raise

            finally:
                await self._notify(result, prefix)

    async def _notify(self, result: JobResult, prefix: str) -> None:
        # listener не влияет на исход job-а
        try:
            await self._listener.after_job(result)
        except Exception:
            logger.exception("%s completion listener failed (status=%s)", prefix, result.status.value)
