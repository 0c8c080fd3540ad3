"""Document store: read, write and list entities under the memory root.

Entities are addressed by logical, forward-slash separated paths
(``people/john-doe``); the store alone maps them to files. Every operation
re-reads storage, so the filesystem is the only source of truth.

Concurrency: there is no locking. Two calls that read-modify-write the same
entity may interleave and the last write wins. Multi-step operations built on
this store are not rolled back if a later step fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .exceptions import EntityNotFoundError
from .exceptions import StorageIOError
from .storage import LocalStorageBackend
from .storage import PathSandbox
from .storage import StorageBackend

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(entity_path: str, operation: str) -> Iterator[None]:
    """Translate raw OS failures into ``StorageIOError`` without leaking absolute paths."""
    try:
        yield
    except UnicodeDecodeError as e:
        raise StorageIOError(entity_path, operation, f"content is not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise StorageIOError(entity_path, operation, e.strerror or e.__class__.__name__) from e


class DocumentStore:
    """Entity-level operations over a sandboxed storage backend."""

    def __init__(self, root: str | Path, storage: StorageBackend | None = None):
        self._sandbox = PathSandbox(root)
        self._storage = storage or LocalStorageBackend(self._sandbox.root)

    @classmethod
    def from_settings(cls, settings) -> DocumentStore:
        return cls(settings.root_path)

    @property
    def root(self) -> Path:
        return self._sandbox.root

    @property
    def sandbox(self) -> PathSandbox:
        return self._sandbox

    def validate(self, entity_path: str, operation: str = "access") -> str:
        """Check confinement and return the entity's root-relative file path.

        Raises:
            PathEscapeError: If the path resolves outside the root.
        """
        self._sandbox.resolve(entity_path, operation)
        return self._sandbox.file_path(entity_path)

    async def write(self, entity_path: str, content: str) -> None:
        """Replace an entity's content wholesale, creating directories as needed."""
        file_path = self.validate(entity_path, "write")
        with _storage_errors(entity_path, "write"):
            await self._storage.write_file(file_path, content)
        logger.debug("Wrote entity %s (%d chars)", entity_path, len(content))

    async def read(self, entity_path: str) -> str:
        """Return the full content of an entity.

        Raises:
            EntityNotFoundError: If the entity does not exist.
        """
        content = await self.try_read(entity_path)
        if content is None:
            raise EntityNotFoundError(entity_path, "read")
        return content

    async def try_read(self, entity_path: str) -> str | None:
        """Return the entity's content, or ``None`` when it does not exist."""
        file_path = self.validate(entity_path, "read")
        with _storage_errors(entity_path, "read"):
            try:
                return await self._storage.read_file(file_path)
            except FileNotFoundError:
                return None

    async def exists(self, entity_path: str) -> bool:
        file_path = self.validate(entity_path, "stat")
        with _storage_errors(entity_path, "stat"):
            return await self._storage.file_exists(file_path)

    async def size(self, entity_path: str) -> int:
        """Size in bytes, or 0 when the entity does not exist."""
        file_path = self.validate(entity_path, "stat")
        with _storage_errors(entity_path, "stat"):
            info = await self._storage.get_file_info(file_path)
        if info is None or info.is_directory:
            return 0
        return info.size

    async def rename(self, source: str, destination: str) -> None:
        """Move an entity to a new logical path, replacing any existing destination."""
        source_file = self.validate(source, "rename")
        destination_file = self.validate(destination, "rename")
        with _storage_errors(source, "rename"):
            try:
                await self._storage.move_file(source_file, destination_file)
            except FileNotFoundError as e:
                raise EntityNotFoundError(source, "rename") from e
        logger.info("Renamed entity %s -> %s", source, destination)

    async def list_entities(self, prefix: str = "") -> list[str]:
        """Every entity under the root, optionally filtered by a literal path prefix."""
        with _storage_errors(prefix or ".", "list"):
            files = await self._storage.list_files(
                "", pattern=f"*{self._sandbox.extension}", recursive=True
            )
        entities = []
        for file_path in files:
            entity_path = self._sandbox.entity_path(file_path)
            if entity_path is not None and entity_path.startswith(prefix):
                entities.append(entity_path)
        return entities
