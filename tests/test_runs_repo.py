from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.enums import JobStatus
from src.runner.repos.runs import JobRunsRepo


def _scalar_session(*values):
    results = []
    for value in values:
        result = MagicMock()
        result.scalar_one.return_value = value
        results.append(result)

    session = AsyncMock()
    session.execute.side_effect = results
    return session


@pytest.mark.asyncio
async def test_next_run_id_starts_at_one():
    session = _scalar_session(0)

    assert await JobRunsRepo().next_run_id(session, "importUserJob") == 1
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_next_run_id_is_previous_max_plus_one():
    session = _scalar_session(0, 4)
    repo = JobRunsRepo()

    assert await repo.next_run_id(session, "importUserJob") == 1
    assert await repo.next_run_id(session, "importUserJob") == 5

    stmt = session.execute.await_args.args[0]
    assert stmt.compile().params["job_name_1"] == "importUserJob"


@pytest.mark.asyncio
async def test_start_run_returns_execution_id_and_commits():
    session = _scalar_session("exec-1")

    execution_id = await JobRunsRepo().start_run(session, job_name="importUserJob", run_id=3)

    assert execution_id == "exec-1"
    params = session.execute.await_args.args[0].compile().params
    assert params["run_id"] == 3
    assert params["status"] == JobStatus.STARTED.value
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_finish_failed_truncates_error_message():
    session = AsyncMock()

    await JobRunsRepo().finish_failed(
        session,
        execution_id="exec-1",
        error_message="x" * 5000,
        read_count=7,
        write_count=5,
        flush_count=1,
    )

    params = session.execute.await_args.args[0].compile().params
    assert params["status"] == JobStatus.FAILED.value
    assert len(params["error_message"]) == 1000
    assert params["write_count"] == 5
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_finish_success_marks_completed():
    session = AsyncMock()

    await JobRunsRepo().finish_success(
        session, execution_id="exec-1", read_count=7, write_count=7, flush_count=2
    )

    params = session.execute.await_args.args[0].compile().params
    assert params["status"] == JobStatus.COMPLETED.value
    assert params["flush_count"] == 2
