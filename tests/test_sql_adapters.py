from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError

from src.core.constants import SOURCE_QUERY
from src.core.exceptions import ReadError, ReaderOpenError, WriteError
from src.models.records import END_OF_STREAM, DestinationRecord, SourceRecord
from src.runner.adapters.readers import CursorRecordReader
from src.runner.adapters.uow import SessionUnitOfWork
from src.runner.adapters.writers import BatchInsertWriter


def _streaming_session(rows):
    result = MagicMock()
    result.fetchone = AsyncMock(side_effect=list(rows) + [None])
    result.close = AsyncMock()

    session = AsyncMock()
    session.stream.return_value = result
    return session, result


@pytest.mark.asyncio
async def test_reader_streams_rows_then_end_of_stream():
    session, result = _streaming_session([(1, "Ann", "Lee", "x"), (2, "Bob", "Kim", "y")])
    reader = CursorRecordReader(session)

    await reader.open()
    first = await reader.next()
    second = await reader.next()
    eos = await reader.next()

    assert first == SourceRecord(id=1, first_name="Ann", last_name="Lee", random_num="x")
    assert second.id == 2
    assert eos is END_OF_STREAM
    assert reader.position == 2

    stmt = session.stream.await_args.args[0]
    assert str(stmt) == SOURCE_QUERY


@pytest.mark.asyncio
async def test_reader_returns_none_after_exhaustion_without_touching_cursor():
    session, result = _streaming_session([])
    reader = CursorRecordReader(session)
    await reader.open()

    assert await reader.next() is END_OF_STREAM
    assert await reader.next() is None
    assert result.fetchone.await_count == 1


@pytest.mark.asyncio
async def test_reader_next_before_open_is_noop():
    reader = CursorRecordReader(AsyncMock())
    assert await reader.next() is None


@pytest.mark.asyncio
async def test_reader_open_failure_is_fatal():
    session = AsyncMock()
    session.stream.side_effect = ProgrammingError("select", {}, Exception("no table reader"))

    with pytest.raises(ReaderOpenError):
        await CursorRecordReader(session).open()


@pytest.mark.asyncio
async def test_reader_close_is_idempotent():
    session, result = _streaming_session([])
    reader = CursorRecordReader(session)
    await reader.open()

    await reader.close()
    await reader.close()

    result.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_writer_single_batch_insert_in_field_order():
    session = AsyncMock()
    records = [
        DestinationRecord(id=1, full_name="Ann Lee", random_num="12345"),
        DestinationRecord(id=2, full_name="Bob Kim", random_num="67890"),
    ]

    written = await BatchInsertWriter().write(session, records)

    assert written == 2
    session.execute.assert_awaited_once()
    stmt, payload = session.execute.await_args.args
    assert "insert into writer (id, full_name, random_num)" in str(stmt)
    assert payload == [
        {"id": 1, "full_name": "Ann Lee", "random_num": "12345"},
        {"id": 2, "full_name": "Bob Kim", "random_num": "67890"},
    ]


@pytest.mark.asyncio
async def test_writer_empty_batch_is_noop():
    session = AsyncMock()
    assert await BatchInsertWriter().write(session, []) == 0
    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_writer_wraps_db_errors():
    session = AsyncMock()
    session.execute.side_effect = SQLAlchemyError("duplicate key")

    with pytest.raises(WriteError) as e:
        await BatchInsertWriter().write(
            session, [DestinationRecord(id=1, full_name="Ann Lee", random_num="12345")]
        )

    assert isinstance(e.value.__cause__, SQLAlchemyError)


@pytest.mark.asyncio
async def test_unit_of_work_commits_via_session_begin():
    session = MagicMock()
    tx = session.begin.return_value
    tx.__aexit__.return_value = False

    async with SessionUnitOfWork(session).transaction() as s:
        assert s is session

    tx.__aenter__.assert_awaited_once()
    exc_type = tx.__aexit__.await_args.args[0]
    assert exc_type is None


@pytest.mark.asyncio
async def test_unit_of_work_propagates_errors_for_rollback():
    session = MagicMock()
    tx = session.begin.return_value
    tx.__aexit__.return_value = False

    with pytest.raises(WriteError):
        async with SessionUnitOfWork(session).transaction():
            raise WriteError("boom")

    exc_type = tx.__aexit__.await_args.args[0]
    assert exc_type is WriteError


@pytest.mark.asyncio
async def test_reader_cursor_failure_mid_stream_is_read_error():
    session, result = _streaming_session([])
    result.fetchone.side_effect = [(1, "Ann", "Lee", "x"), OperationalError("fetch", {}, Exception("lost"))]
    reader = CursorRecordReader(session)
    await reader.open()

    assert (await reader.next()).id == 1
    with pytest.raises(ReadError) as e:
        await reader.next()

    assert isinstance(e.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_unit_of_work_commit_failure_is_write_error():
    session = MagicMock()
    tx = session.begin.return_value
    tx.__aexit__.side_effect = OperationalError("commit", {}, Exception("connection is closed"))

    with pytest.raises(WriteError) as e:
        async with SessionUnitOfWork(session).transaction():
            pass

    assert isinstance(e.value.__cause__, OperationalError)
