from __future__ import annotations

import logging
from dataclasses import dataclass

from src.config import JobConfig
from src.core.constants import LOGGER_NAME
from src.core.enums import RunnerState
from src.models.records import END_OF_STREAM, DestinationRecord
from src.runner.ports.reader import RecordReader
from src.runner.ports.transform import Transformer
from src.runner.ports.uow import UnitOfWork
from src.runner.ports.writer import Writer

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True, slots=True)
class ChunkStats:
    read_count: int
    write_count: int
    flush_count: int
    skip_count: int


class ChunkRunner:
    """Chunk-oriented цикл read -> process -> write.

    Каждый чанк целиком (чтение, трансформация, batch insert, commit) живёт
    в одной транзакции unit of work. Ошибка откатывает текущий чанк и
    пробрасывается дальше; уже закоммиченные чанки остаются в БД.
    """

    def __init__(
        self,
        *,
        reader: RecordReader,
        transformer: Transformer,
        writer: Writer,
        uow: UnitOfWork,
        config: JobConfig,
        ctx: str = "",
    ) -> None:
        self._reader = reader
        self._transformer = transformer
        self._writer = writer
        self._uow = uow
        self._chunk_size = config.chunk_size
        self._ctx = ctx or f"job={config.job_name}"

        self._state = RunnerState.RUNNING
        self._exhausted = False
        self._read_count = 0
        self._write_count = 0
        self._flush_count = 0
        self._skip_count = 0

    @property
    def state(self) -> RunnerState:
        return self._state

    def stats(self) -> ChunkStats:
        return ChunkStats(
            read_count=self._read_count,
            write_count=self._write_count,
            flush_count=self._flush_count,
            skip_count=self._skip_count,
        )

    async def run(self) -> ChunkStats:
        chunk_no = 0

        logger.info("%s CHUNK start chunk_size=%d", self._ctx, self._chunk_size)

        while self._state is not RunnerState.COMPLETE:
            chunk_no += 1
            self._state = RunnerState.RUNNING

            async with self._uow.transaction() as session:
                buffer = await self._fill_chunk()

                self._state = RunnerState.FLUSHING
                if buffer:
                    written = await self._writer.write(session, buffer)
                    self._write_count += int(written or 0)
                    self._flush_count += 1
                    logger.info(
                        "%s CHUNK chunk=%d flushed=%d total_written=%d",
                        self._ctx, chunk_no, len(buffer), self._write_count,
                    )
                else:
                    # пустой финальный чанк: коммитим пустую транзакцию
                    logger.info("%s CHUNK chunk=%d empty final flush", self._ctx, chunk_no)

            if self._exhausted:
                self._state = RunnerState.COMPLETE

        logger.info(
            "%s CHUNK complete read=%d written=%d flushes=%d skipped=%d",
            self._ctx,
            self._read_count,
            self._write_count,
            self._flush_count,
            self._skip_count,
        )
        return self.stats()

    async def _fill_chunk(self) -> list[DestinationRecord]:
        buffer: list[DestinationRecord] = []

        while len(buffer) < self._chunk_size:
            item = await self._reader.next()

            if item is END_OF_STREAM:
                self._exhausted = True
                break

            # None не считается концом потока. Reader, который отдаёт только None
            # и никогда END_OF_STREAM, зациклит run(): ограничения на число пропусков нет.
            if item is None:
                self._skip_count += 1
                logger.debug("%s reader returned null, reading next", self._ctx)
                continue

            self._read_count += 1
            buffer.append(self._transformer.apply(item))

        return buffer
