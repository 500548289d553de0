"""Bounded-concurrency batch file writer.

:class:`ParallelFileWriter` takes a batch of :class:`FileWriteOperation`
items and writes them under a base directory with at most ``concurrency``
writes in flight. Every operation ends in exactly one terminal state
(success, failed or skipped) and a failure never cancels its siblings.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from blueprint.config import DEFAULT_CONCURRENCY, MAX_CONCURRENCY
from blueprint.core.errors import BlueprintError, FileOperationError
from blueprint.io.filesystem import FileSystem
from blueprint.utils import Reporter, format_duration
from blueprint.validation import validate_relative_path


@dataclass(frozen=True)
class FileWriteOperation:
    """One file destined for the filesystem."""

    relative_path: str
    content: str
    overwrite: bool = True


class WriteStatus(str, Enum):
    """Terminal state of a single write operation."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class WriteOutcome(BaseModel):
    """Outcome of a single write operation."""

    path: str = Field(..., description="Relative path as submitted")
    status: WriteStatus
    error: str | None = Field(default=None, description="Captured error message for failures")


class FileWriteResult(BaseModel):
    """Aggregate of a batch write; accounts for every submitted operation."""

    successful: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    outcomes: list[WriteOutcome] = Field(default_factory=list)
    total_time_seconds: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[misc]
    @property
    def total(self) -> int:
        return self.successful + self.failed + self.skipped

    @property
    def failures(self) -> list[WriteOutcome]:
        """The failed outcomes, in submission order."""
        return [o for o in self.outcomes if o.status is WriteStatus.FAILED]

    @classmethod
    def from_outcomes(cls, outcomes: list[WriteOutcome], total_time: float) -> FileWriteResult:
        return cls(
            successful=sum(1 for o in outcomes if o.status is WriteStatus.SUCCESS),
            failed=sum(1 for o in outcomes if o.status is WriteStatus.FAILED),
            skipped=sum(1 for o in outcomes if o.status is WriteStatus.SKIPPED),
            outcomes=outcomes,
            total_time_seconds=total_time,
        )

    def __str__(self) -> str:
        return (
            f"FileWriteResult(successful: {self.successful}, failed: {self.failed}, "
            f"skipped: {self.skipped}, time: {format_duration(self.total_time_seconds)})"
        )


class ParallelFileWriter:
    """Writes batches of files concurrently with failure isolation."""

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.filesystem = filesystem or FileSystem()
        self.reporter = reporter or Reporter()

    async def write_all(
        self,
        base_directory: str | Path,
        operations: list[FileWriteOperation],
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> FileWriteResult:
        """Write every operation under *base_directory*.

        Args:
            base_directory: Root directory every relative path resolves under.
            operations: The batch to write.
            concurrency: Upper bound on simultaneously in-flight writes,
                clamped to ``[1, MAX_CONCURRENCY]``.

        Returns:
            A :class:`FileWriteResult` with one outcome per operation, in
            submission order. Returns only after every operation finished.
        """
        start = time.monotonic()

        if not operations:
            self.reporter.warning("No files to write")
            return FileWriteResult(total_time_seconds=time.monotonic() - start)

        effective = max(1, min(concurrency, MAX_CONCURRENCY))
        self.reporter.debug(
            f"Writing {len(operations)} files with concurrency: {effective}"
        )

        base = Path(base_directory).resolve()
        semaphore = asyncio.Semaphore(effective)

        async def _write_with_semaphore(op: FileWriteOperation) -> WriteOutcome:
            async with semaphore:
                return await self._write_one(base, op)

        tasks = [_write_with_semaphore(op) for op in operations]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: list[WriteOutcome] = []
        for op, res in zip(operations, results):
            if isinstance(res, BaseException):
                outcomes.append(
                    WriteOutcome(
                        path=op.relative_path,
                        status=WriteStatus.FAILED,
                        error=f"Unhandled exception: {res}",
                    )
                )
            else:
                outcomes.append(res)

        result = FileWriteResult.from_outcomes(outcomes, time.monotonic() - start)

        for failure in result.failures:
            self.reporter.warning(f"Failed to write {failure.path}: {failure.error}")
        self.reporter.debug(
            f"Parallel write complete: {result.successful} succeeded, "
            f"{result.failed} failed, {result.skipped} skipped "
            f"({format_duration(result.total_time_seconds)})"
        )
        return result

    async def _write_one(self, base: Path, op: FileWriteOperation) -> WriteOutcome:
        """Write a single operation and capture its terminal state."""
        try:
            relative = validate_relative_path(op.relative_path)
            target = base / relative
            if not target.resolve().is_relative_to(base):
                raise FileOperationError(
                    "Attempted path traversal: file would be outside root directory",
                    file_path=op.relative_path,
                    operation="write",
                )

            if not op.overwrite and await asyncio.to_thread(self.filesystem.exists, target):
                self.reporter.debug(f"Skipping existing file: {relative}")
                return WriteOutcome(path=op.relative_path, status=WriteStatus.SKIPPED)

            await asyncio.to_thread(self.filesystem.write_file, target, op.content)
        except BlueprintError as exc:
            return WriteOutcome(path=op.relative_path, status=WriteStatus.FAILED, error=exc.message)
        except OSError as exc:
            return WriteOutcome(path=op.relative_path, status=WriteStatus.FAILED, error=str(exc))

        self.reporter.debug(f"File written: {relative}")
        return WriteOutcome(path=op.relative_path, status=WriteStatus.SUCCESS)
