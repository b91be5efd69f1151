from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.core.constants import RUNS_TABLE
from src.core.enums import JobStatus
from .base import Base


class JobRun(Base):
    """История запусков job-а (batch_job_runs)."""

    __tablename__ = RUNS_TABLE
    __table_args__ = (
        CheckConstraint(
            "status IN ('STARTED', 'COMPLETED', 'FAILED')",
            name="batch_job_runs_status_check",
        ),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        server_default=func.gen_random_uuid(),
    )

    job_name: Mapped[str] = mapped_column(Text, nullable=False)
    # инкрементируется на каждый запуск (RunIdIncrementer)
    run_id: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=JobStatus.STARTED.value,
    )

    started_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
    )
    finished_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    read_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    write_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    flush_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
