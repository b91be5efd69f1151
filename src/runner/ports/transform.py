from __future__ import annotations

from typing import Protocol

from src.models.records import DestinationRecord, SourceRecord


class Transformer(Protocol):
    """Transformer маппит одну запись источника в одну запись назначения (без I/O)."""

    def apply(self, record: SourceRecord) -> DestinationRecord:
        ...
