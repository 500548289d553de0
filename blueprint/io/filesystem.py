"""Filesystem primitives used by the generator.

:class:`FileSystem` is the single place that touches the disk. Its methods
are synchronous; async callers run them through ``asyncio.to_thread``.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path

from blueprint.core.errors import FileOperationError

# Content larger than this is refused (10 MiB).
MAX_FILE_SIZE = 10 * 1024 * 1024


class FileSystem:
    """Directory preparation and file writing on the local disk."""

    def ensure_directory(self, path: str | Path) -> Path:
        """Create a directory (and parents) if it does not exist.

        Raises:
            FileOperationError: If the directory cannot be created.
        """
        dir_path = Path(path)
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileOperationError(
                f"Failed to create directory: {exc.strerror or exc}",
                file_path=str(dir_path),
                operation="mkdir",
                cause=exc,
            ) from exc
        return dir_path.resolve()

    def write_file(self, path: str | Path, content: str) -> Path:
        """Write *content* to *path*, truncating any existing file.

        Parent directories are created automatically.

        Raises:
            FileOperationError: On size violations or any OS-level error.
        """
        file_path = Path(path)
        size = len(content.encode("utf-8"))
        if size > MAX_FILE_SIZE:
            raise FileOperationError(
                f"Content size ({size} bytes) exceeds maximum ({MAX_FILE_SIZE} bytes)",
                file_path=str(file_path),
                operation="write",
            )
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise FileOperationError(
                f"Failed to write file: {exc.strerror or exc}",
                file_path=str(file_path),
                operation="write",
                cause=exc,
            ) from exc
        return file_path

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def is_directory_populated(self, path: str | Path) -> bool:
        """True when *path* is a directory containing at least one entry."""
        dir_path = Path(path)
        if not dir_path.is_dir():
            return False
        with os.scandir(dir_path) as entries:
            return any(True for _ in entries)

    def is_writable(self, path: str | Path) -> bool:
        """Probe write permission by creating and deleting a scratch file."""
        dir_path = Path(path)
        if not dir_path.is_dir():
            return False
        probe = dir_path / f".write_test_{uuid.uuid4().hex}"
        try:
            probe.write_text("test", encoding="utf-8")
            probe.unlink()
        except OSError:
            return False
        return True

    def prepare_target_directory(self, path: str | Path, overwrite: bool = False) -> Path:
        """Make sure the generation target exists, is writable and may be used.

        A non-empty existing directory is refused unless *overwrite* is set,
        in which case generated files are written over its contents.

        Raises:
            FileOperationError: If the directory is populated (without
                *overwrite*), cannot be created, or is not writable.
        """
        dir_path = Path(path)
        if dir_path.exists() and not dir_path.is_dir():
            raise FileOperationError(
                "Target path exists and is not a directory",
                file_path=str(dir_path),
                operation="prepare",
            )
        if self.is_directory_populated(dir_path) and not overwrite:
            raise FileOperationError(
                "Target directory is not empty. Use --force to overwrite.",
                file_path=str(dir_path),
                operation="prepare",
            )

        resolved = self.ensure_directory(dir_path)
        if not self.is_writable(resolved):
            raise FileOperationError(
                "Target directory is not writable",
                file_path=str(resolved),
                operation="prepare",
            )
        return resolved
