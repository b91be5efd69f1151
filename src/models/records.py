from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional


@dataclass(frozen=True, slots=True)
class SourceRecord:
    """Строка из таблицы reader. Имена не валидируются на чтении."""

    id: int
    first_name: Optional[str]
    last_name: Optional[str]
    random_num: Optional[str]


@dataclass(frozen=True, slots=True)
class DestinationRecord:
    """Строка для таблицы writer."""

    id: int
    full_name: str
    random_num: str

    def as_params(self) -> dict[str, object]:
        return {"id": self.id, "full_name": self.full_name, "random_num": self.random_num}


class EndOfStream:
    _instance: "EndOfStream | None" = None

    def __new__(cls) -> "EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM: Final = EndOfStream()
