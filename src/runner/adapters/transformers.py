from __future__ import annotations

import logging
import random
import string

from src.core.constants import LOGGER_NAME, RANDOM_TAG_LENGTH
from src.core.exceptions import MissingNameError
from src.models.records import DestinationRecord, SourceRecord

logger = logging.getLogger(LOGGER_NAME)


class RandomTagGenerator:
    """Короткий псевдослучайный числовой тег: ровно `length` десятичных цифр."""

    def __init__(self, rng: random.Random | None = None, *, length: int = RANDOM_TAG_LENGTH) -> None:
        self._rng = rng or random.Random()
        self._length = length

    def next_tag(self) -> str:
        return "".join(self._rng.choice(string.digits) for _ in range(self._length))


class RecordTransformer:
    def __init__(self, *, tag_generator: RandomTagGenerator | None = None) -> None:
        self._tags = tag_generator or RandomTagGenerator()

    def apply(self, record: SourceRecord) -> DestinationRecord:
        logger.info("Processing record: %s", record)

        # без плейсхолдеров: пустое имя валит чанк
        if record.first_name is None:
            raise MissingNameError(record.id, "first_name")
        if record.last_name is None:
            raise MissingNameError(record.id, "last_name")

        out = DestinationRecord(
            id=record.id,
            full_name=record.first_name + " " + record.last_name,
            random_num=self._tags.next_tag(),
        )
        logger.info("Processed record: %s", out)
        return out
