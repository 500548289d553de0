"""Tests for the bounded-concurrency batch writer (blueprint.io.writer)."""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from blueprint.io.filesystem import MAX_FILE_SIZE, FileSystem
from blueprint.io.writer import (
    FileWriteOperation,
    FileWriteResult,
    ParallelFileWriter,
    WriteOutcome,
    WriteStatus,
)

pytestmark = pytest.mark.unit


class TrackingFileSystem(FileSystem):
    """Records the peak number of simultaneous ``write_file`` calls."""

    def __init__(self, delay: float = 0.01) -> None:
        self.delay = delay
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def write_file(self, path, content):
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            time.sleep(self.delay)
            return super().write_file(path, content)
        finally:
            with self._lock:
                self.in_flight -= 1


class ExplodingFileSystem(FileSystem):
    """Raises a non-I/O exception for one path."""

    def __init__(self, bad_name: str) -> None:
        self.bad_name = bad_name

    def write_file(self, path, content):
        if Path(path).name == self.bad_name:
            raise RuntimeError("unexpected failure")
        return super().write_file(path, content)


def _ops(count: int) -> list[FileWriteOperation]:
    return [FileWriteOperation(f"dir{i % 3}/file{i}.txt", f"content {i}") for i in range(count)]


@pytest.fixture
def writer(reporter) -> ParallelFileWriter:
    return ParallelFileWriter(reporter=reporter)


class TestWriteAll:
    @pytest.mark.asyncio
    async def test_writes_every_file(self, writer, tmp_path):
        result = await writer.write_all(tmp_path, _ops(12))
        assert result.successful == 12
        assert result.failed == 0
        assert result.total == 12
        assert (tmp_path / "dir1" / "file4.txt").read_text() == "content 4"

    @pytest.mark.asyncio
    async def test_outcomes_in_submission_order(self, writer, tmp_path):
        ops = _ops(5)
        result = await writer.write_all(tmp_path, ops)
        assert [o.path for o in result.outcomes] == [op.relative_path for op in ops]

    @pytest.mark.asyncio
    async def test_truncates_existing_file(self, writer, tmp_path):
        (tmp_path / "a.txt").write_text("a much longer original content")
        await writer.write_all(tmp_path, [FileWriteOperation("a.txt", "short")])
        assert (tmp_path / "a.txt").read_text() == "short"

    @pytest.mark.asyncio
    async def test_empty_batch(self, writer, tmp_path, console_buffer):
        result = await writer.write_all(tmp_path, [])
        assert result.total == 0
        assert "No files to write" in console_buffer.getvalue()

    @pytest.mark.asyncio
    async def test_failure_isolation(self, writer, tmp_path):
        (tmp_path / "blocker").write_text("a file, not a directory")
        ops = _ops(9) + [FileWriteOperation("blocker/child.txt", "x")]

        result = await writer.write_all(tmp_path, ops)

        assert result.successful == 9
        assert result.failed == 1
        assert [o.path for o in result.failures] == ["blocker/child.txt"]
        assert result.failures[0].error
        for op in ops[:9]:
            assert (tmp_path / op.relative_path).read_text() == op.content

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_isolated(self, reporter, tmp_path):
        writer = ParallelFileWriter(ExplodingFileSystem("file2.txt"), reporter)
        result = await writer.write_all(tmp_path, _ops(5))
        assert result.successful == 4
        assert result.failed == 1
        assert "unexpected failure" in result.failures[0].error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["../escape.txt", "/abs/path.txt", "a/../../b.txt", ""])
    async def test_rejects_unsafe_paths(self, writer, tmp_path, path):
        result = await writer.write_all(tmp_path, [FileWriteOperation(path, "x")])
        assert result.failed == 1
        assert not (tmp_path.parent / "escape.txt").exists()

    @pytest.mark.asyncio
    async def test_rejects_oversized_content(self, writer, tmp_path):
        big = "x" * (MAX_FILE_SIZE + 1)
        result = await writer.write_all(tmp_path, [FileWriteOperation("big.txt", big)])
        assert result.failed == 1
        assert "exceeds maximum" in result.failures[0].error
        assert not (tmp_path / "big.txt").exists()

    @pytest.mark.asyncio
    async def test_skips_existing_when_overwrite_disabled(self, writer, tmp_path):
        (tmp_path / "keep.txt").write_text("original")
        ops = [
            FileWriteOperation("keep.txt", "replaced", overwrite=False),
            FileWriteOperation("new.txt", "fresh", overwrite=False),
        ]
        result = await writer.write_all(tmp_path, ops)
        assert (result.successful, result.failed, result.skipped) == (1, 0, 1)
        assert result.outcomes[0].status is WriteStatus.SKIPPED
        assert (tmp_path / "keep.txt").read_text() == "original"
        assert (tmp_path / "new.txt").read_text() == "fresh"


    @pytest.mark.asyncio
    async def test_bracketed_paths_are_written_and_reported(self, writer, tmp_path, console_buffer):
        (tmp_path / "c[").mkdir()
        (tmp_path / "c[" / "d]").write_text("a file, not a directory")
        ops = [
            FileWriteOperation("a[/b]", "x"),
            FileWriteOperation("c[/d]/e.txt", "y"),
        ]

        result = await writer.write_all(tmp_path, ops)

        assert [o.status for o in result.outcomes] == [WriteStatus.SUCCESS, WriteStatus.FAILED]
        assert (tmp_path / "a[" / "b]").read_text() == "x"
        output = console_buffer.getvalue()
        assert "File written: a[/b]" in output
        assert "Failed to write c[/d]/e.txt" in output


class TestConcurrency:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency", [1, 2, 5, 20])
    async def test_completeness_for_every_bound(self, reporter, tmp_path, concurrency):
        writer = ParallelFileWriter(TrackingFileSystem(delay=0), reporter)
        result = await writer.write_all(tmp_path, _ops(20), concurrency=concurrency)
        assert result.successful == 20
        assert len(result.outcomes) == 20
        assert len(list(tmp_path.rglob("*.txt"))) == 20

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency", [1, 3])
    async def test_in_flight_bound(self, reporter, tmp_path, concurrency):
        fs = TrackingFileSystem(delay=0.02)
        writer = ParallelFileWriter(fs, reporter)
        await writer.write_all(tmp_path, _ops(12), concurrency=concurrency)
        assert 1 <= fs.peak <= concurrency

    @pytest.mark.asyncio
    async def test_concurrency_is_clamped(self, reporter, tmp_path):
        fs = TrackingFileSystem(delay=0.01)
        writer = ParallelFileWriter(fs, reporter)
        result = await writer.write_all(tmp_path, _ops(4), concurrency=0)
        assert result.successful == 4
        assert fs.peak == 1


class TestFileWriteResult:
    def test_from_outcomes(self):
        outcomes = [
            WriteOutcome(path="a", status=WriteStatus.SUCCESS),
            WriteOutcome(path="b", status=WriteStatus.FAILED, error="boom"),
            WriteOutcome(path="c", status=WriteStatus.SKIPPED),
        ]
        result = FileWriteResult.from_outcomes(outcomes, 0.5)
        assert (result.successful, result.failed, result.skipped, result.total) == (1, 1, 1, 3)
        assert result.failures == [outcomes[1]]
        assert "failed: 1" in str(result)

    def test_total_is_serialised(self):
        assert FileWriteResult(successful=2).model_dump()["total"] == 2
