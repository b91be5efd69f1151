from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "local"

    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "batch_demo"
    db_user: str = "batch_user"
    db_password: str = "batch_password"

    job_name: str = "importUserJob"
    chunk_size: int = Field(default=5, gt=0)
    # если не задан, берём max(run_id) + 1 из batch_job_runs
    run_id: int | None = None

    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        # asyncpg + SQLAlchemy 2.x
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@dataclass(frozen=True, slots=True)
class JobConfig:
    """Конфигурация одного job-а. Собирается один раз на старте и передаётся в конструкторы."""

    job_name: str = "importUserJob"
    chunk_size: int = 5

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "JobConfig":
        return cls(job_name=settings.job_name, chunk_size=settings.chunk_size)


@lru_cache
def get_settings() -> Settings:
    return Settings()
