"""Filesystem access and the bounded-concurrency batch writer."""

from .filesystem import MAX_FILE_SIZE, FileSystem
from .writer import (
    FileWriteOperation,
    FileWriteResult,
    ParallelFileWriter,
    WriteOutcome,
    WriteStatus,
)

__all__ = [
    "FileSystem",
    "MAX_FILE_SIZE",
    "FileWriteOperation",
    "FileWriteResult",
    "ParallelFileWriter",
    "WriteOutcome",
    "WriteStatus",
]
