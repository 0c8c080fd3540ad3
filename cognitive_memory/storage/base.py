"""Abstract Base Class for Storage Backends.

Defines the raw file primitives the document store is built on. Paths are
root-relative file paths (e.g. ``people/john-doe.md``); backends must refuse
any path that resolves outside their root.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass
class FileInfo:
    """Metadata about a stored file."""

    path: str
    size: int
    last_modified: datetime
    is_directory: bool = False
    content_type: str = "text/markdown"


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Return the backend type identifier (e.g., 'local')."""

    @property
    @abstractmethod
    def root_path(self) -> str:
        """Return the root path for storage."""

    # === File Operations ===

    @abstractmethod
    async def read_file(self, path: str) -> str:
        """Read file content as UTF-8 text.

        Args:
            path: Relative path from storage root (e.g., "people/john-doe.md")

        Returns:
            File content as string

        Raises:
            FileNotFoundError: If file does not exist
        """

    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        """Replace a file's content, creating parent directories as needed.

        Args:
            path: Relative path from storage root
            content: Text content to write
        """

    @abstractmethod
    async def file_exists(self, path: str) -> bool:
        """Check if a regular file exists at ``path``."""

    @abstractmethod
    async def get_file_info(self, path: str) -> FileInfo | None:
        """Get metadata about a file.

        Returns:
            FileInfo if file exists, None otherwise
        """

    # === Directory Operations ===

    @abstractmethod
    async def list_files(self, path: str = "", pattern: str = "*.md", recursive: bool = False) -> list[str]:
        """List files matching a glob pattern.

        Args:
            path: Relative directory to start from (empty for root)
            pattern: Glob pattern matched against file names
            recursive: Descend into subdirectories

        Returns:
            Sorted file paths relative to the storage root, using ``/`` separators
        """

    # === Bulk Operations ===

    @abstractmethod
    async def move_file(self, source: str, destination: str) -> None:
        """Move/rename a file, replacing any existing destination.

        Raises:
            FileNotFoundError: If the source does not exist
        """
