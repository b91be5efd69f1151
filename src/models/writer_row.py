from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.constants import TARGET_TABLE
from .base import Base


class WriterRow(Base):
    """Destination-таблица writer (только для чтения результатов после job-а)."""

    __tablename__ = TARGET_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    random_num: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"WriterRow(id={self.id}, full_name={self.full_name!r}, random_num={self.random_num!r})"
