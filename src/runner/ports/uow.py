from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class UnitOfWork(Protocol):
    """Транзакционная граница чанка: всё коммитится вместе или откатывается."""

    def transaction(self) -> AbstractAsyncContextManager[AsyncSession]:
        ...
