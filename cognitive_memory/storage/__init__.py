"""Storage layer for the cognitive memory server.

Raw file primitives live behind ``StorageBackend``; the local filesystem
backend confines every path to the memory root via ``PathSandbox``.

Usage:
    from cognitive_memory.storage import LocalStorageBackend

    storage = LocalStorageBackend("/path/to/memory")
    await storage.write_file("people/john-doe.md", "# John Doe")
"""

from .base import FileInfo
from .base import StorageBackend
from .local import LocalStorageBackend
from .sandbox import ENTITY_EXTENSION
from .sandbox import PathSandbox

__all__ = ["ENTITY_EXTENSION", "FileInfo", "LocalStorageBackend", "PathSandbox", "StorageBackend"]
