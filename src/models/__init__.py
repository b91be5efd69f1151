from .records import END_OF_STREAM, DestinationRecord, EndOfStream, SourceRecord
from .job_run import JobRun
from .writer_row import WriterRow

__all__ = [
    "END_OF_STREAM",
    "DestinationRecord",
    "EndOfStream",
    "SourceRecord",
    "JobRun",
    "WriterRow",
]
