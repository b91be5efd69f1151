from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import INSERT_SQL, LOGGER_NAME
from src.core.exceptions import WriteError
from src.models.records import DestinationRecord

logger = logging.getLogger(LOGGER_NAME)


class BatchInsertWriter:
    """Один executemany на чанк в таблицу writer. Коммит делает unit of work."""

    def __init__(self, insert_sql: str = INSERT_SQL) -> None:
        self._insert_sql = text(insert_sql)

    async def write(
        self,
        session: AsyncSession,
        records: Sequence[DestinationRecord],
    ) -> int:
        if not records:
            return 0

        # порядок параметров: id, full_name, random_num
        payload = [r.as_params() for r in records]
        try:
            await session.execute(self._insert_sql, payload)
        except SQLAlchemyError as exc:
            raise WriteError(f"batch insert of {len(payload)} record(s) failed: {exc}") from exc

        logger.info("Writer inserted batch size=%d ids=%s", len(payload), [p["id"] for p in payload])
        return len(payload)
