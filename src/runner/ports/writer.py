from __future__ import annotations

from typing import Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.records import DestinationRecord


class Writer(Protocol):
    """Writer пишет чанк одним batch insert и возвращает число записанных строк."""

    async def write(self, session: AsyncSession, records: Sequence[DestinationRecord]) -> int:
        ...
