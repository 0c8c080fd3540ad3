"""Local Filesystem Storage Backend.

Implements the StorageBackend interface on a directory confined by a
``PathSandbox``.
"""

from __future__ import annotations

import fnmatch
import os
import shutil
from datetime import datetime
from datetime import timezone
from pathlib import Path

from .base import FileInfo
from .base import StorageBackend
from .sandbox import PathSandbox


class LocalStorageBackend(StorageBackend):
    """Storage backend using the local filesystem.

    Args:
        root_dir: Root directory for memory storage. It is not created until
                  the first write, so a missing root simply lists as empty.
    """

    def __init__(self, root_dir: str | Path):
        self._sandbox = PathSandbox(root_dir)
        self._root = self._sandbox.root

    @property
    def backend_type(self) -> str:
        return "local"

    @property
    def root_path(self) -> str:
        return str(self._root)

    @property
    def sandbox(self) -> PathSandbox:
        return self._sandbox

    def _full_path(self, path: str) -> Path:
        """Convert relative path to a confined absolute path."""
        return self._sandbox.resolve_file(path)

    def _relative(self, full_path: Path) -> str:
        return full_path.relative_to(self._root).as_posix()

    # === File Operations ===

    # newline="" keeps line endings byte-for-byte in both directions
    async def read_file(self, path: str) -> str:
        full_path = self._full_path(path)
        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        with open(full_path, encoding="utf-8", newline="") as f:
            return f.read()

    async def write_file(self, path: str, content: str) -> None:
        full_path = self._full_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        with open(full_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    async def file_exists(self, path: str) -> bool:
        return self._full_path(path).is_file()

    async def get_file_info(self, path: str) -> FileInfo | None:
        full_path = self._full_path(path)
        if not full_path.exists():
            return None

        stat = full_path.stat()
        return FileInfo(
            path=path,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            is_directory=full_path.is_dir(),
            content_type=self._get_content_type(path),
        )

    def _get_content_type(self, path: str) -> str:
        """Determine content type from file extension."""
        ext = Path(path).suffix.lower()
        content_types = {
            ".md": "text/markdown",
            ".txt": "text/plain",
        }
        return content_types.get(ext, "application/octet-stream")

    # === Directory Operations ===

    async def list_files(self, path: str = "", pattern: str = "*.md", recursive: bool = False) -> list[str]:
        start = self._full_path(path) if path else self._root
        if not start.is_dir():
            return []

        files = []
        for dirpath, dirnames, filenames in os.walk(start):
            for name in filenames:
                if not fnmatch.fnmatch(name, pattern):
                    continue
                candidate = Path(dirpath) / name
                # Skip symlinks that point outside the root
                if not self._sandbox.is_within_root(candidate.resolve()):
                    continue
                files.append(self._relative(candidate))
            if not recursive:
                dirnames.clear()

        return sorted(files)

    # === Bulk Operations ===

    async def move_file(self, source: str, destination: str) -> None:
        src_path = self._full_path(source)
        dst_path = self._full_path(destination)

        if not src_path.exists():
            raise FileNotFoundError(f"Source file not found: {source}")

        dst_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(src_path, dst_path)
