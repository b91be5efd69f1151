from __future__ import annotations


class JobError(Exception):
    """Базовая ошибка batch-job-а."""


class ReaderOpenError(JobError):
    """Не удалось открыть курсор по source-таблице."""


class TransformError(JobError):
    """Ошибка маппинга SourceRecord -> DestinationRecord."""


class MissingNameError(TransformError):
    """У записи источника нет firstName или lastname."""

    def __init__(self, record_id: int, field: str) -> None:
        super().__init__(f"record id={record_id} has no {field}")
        self.record_id = record_id
        self.field = field


class WriteError(JobError):
    """Ошибка batch insert в destination-таблицу."""


class ReadError(JobError):
    """Курсор source-таблицы упал посреди чтения."""
