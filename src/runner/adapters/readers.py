from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncResult, AsyncSession

from src.core.constants import LOGGER_NAME, SOURCE_QUERY
from src.core.exceptions import ReadError, ReaderOpenError
from src.models.records import END_OF_STREAM, EndOfStream, SourceRecord

logger = logging.getLogger(LOGGER_NAME)


class CursorRecordReader:
    """Forward-only курсор по source-запросу.

    END_OF_STREAM - единственный сигнал исчерпания. После него (и до open())
    next() возвращает None и ничего не делает.
    """

    def __init__(self, session: AsyncSession, *, query: str = SOURCE_QUERY) -> None:
        self._session = session
        self._query = query
        self._result: AsyncResult | None = None
        self._exhausted = False
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    async def open(self) -> None:
        try:
            # server-side курсор: строки тянутся по мере next()
            self._result = await self._session.stream(text(self._query))
        except SQLAlchemyError as exc:
            raise ReaderOpenError(f"cannot open source cursor: {exc}") from exc

        self._exhausted = False
        self._position = 0
        logger.info("Reader cursor opened: %s", self._query)

    async def next(self) -> SourceRecord | EndOfStream | None:
        if self._result is None or self._exhausted:
            logger.info("Returning null from reader (cursor not open or exhausted)")
            return None

        try:
            row = await self._result.fetchone()
        except SQLAlchemyError as exc:
            raise ReadError(f"source cursor failed after {self._position} record(s): {exc}") from exc

        if row is None:
            self._exhausted = True
            logger.info("Reader reached end of stream after %d record(s)", self._position)
            return END_OF_STREAM

        id_, first_name, last_name, random_num = row
        record = SourceRecord(
            id=int(id_),
            first_name=first_name,
            last_name=last_name,
            random_num=random_num,
        )
        self._position += 1

        logger.info("Reader record: %s", record)
        return record

    async def close(self) -> None:
        result, self._result = self._result, None
        if result is not None:
            await result.close()
