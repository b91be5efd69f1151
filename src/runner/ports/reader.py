from __future__ import annotations

from typing import Protocol

from src.models.records import EndOfStream, SourceRecord


class RecordReader(Protocol):
    """Reader отдаёт записи источника по одной, в конце END_OF_STREAM."""

    async def next(self) -> SourceRecord | EndOfStream | None:
        """None: курсор в невалидном состоянии (no-op), а не конец потока."""
        ...
