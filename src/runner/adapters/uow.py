from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import WriteError


class SessionUnitOfWork:
    """Одна транзакция writer-сессии на чанк: commit при выходе, rollback при ошибке."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session.begin():
                yield self._session
        except SQLAlchemyError as exc:
            raise WriteError(f"chunk transaction failed: {exc}") from exc
