from __future__ import annotations

import asyncpg
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

# признаки потери соединения в тексте ошибок asyncpg / ОС
_DISCONNECT_MARKERS: tuple[str, ...] = (
    "connection is closed",
    "connection was closed",
    "connection does not exist",
    "connection refused",
    "connect call failed",
    "no address associated with hostname",
    "the database system is starting up",
    "closed in the middle of operation",
)


def is_db_disconnect(exc: BaseException) -> bool:
    """True, если job упал из-за потери соединения с БД, а не из-за данных."""
    # ReaderOpenError / WriteError оборачивают исходную ошибку драйвера
    cause = exc.__cause__
    if cause is not None and cause is not exc and is_db_disconnect(cause):
        return True

    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True

    if isinstance(exc, (asyncpg.PostgresError, OSError)):
        msg = str(exc).lower()
        return any(marker in msg for marker in _DISCONNECT_MARKERS)

    return False
