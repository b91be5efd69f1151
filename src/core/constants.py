from __future__ import annotations

SOURCE_TABLE = "reader"
TARGET_TABLE = "writer"
RUNS_TABLE = "batch_job_runs"

SOURCE_QUERY = f"select id, firstName, lastname, random_num from {SOURCE_TABLE}"

INSERT_SQL = (
    f"insert into {TARGET_TABLE} (id, full_name, random_num) "
    "values (:id, :full_name, :random_num)"
)

RANDOM_TAG_LENGTH = 5

LOGGER_NAME = "record_etl"
