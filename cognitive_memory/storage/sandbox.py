"""Path confinement for the memory root.

Logical entity paths such as ``people/john-doe`` map to ``<root>/people/john-doe.md``.
The mapping is checked after resolution (``..`` segments, absolute prefixes and
symlinks are all resolved first), so a path only passes if its final location
is the root itself or lies strictly inside it.
"""

from __future__ import annotations

from pathlib import Path

from ..exceptions import PathEscapeError

ENTITY_EXTENSION = ".md"


class PathSandbox:
    """Resolves logical paths under a fixed root and rejects escapes."""

    def __init__(self, root: str | Path, extension: str = ENTITY_EXTENSION):
        self._root = Path(root).expanduser().resolve()
        self._extension = extension

    @property
    def root(self) -> Path:
        return self._root

    @property
    def extension(self) -> str:
        return self._extension

    def is_within_root(self, location: Path) -> bool:
        """True when ``location`` is the root or strictly below it."""
        return location == self._root or self._root in location.parents

    def resolve_file(self, relative_path: str, operation: str | None = None) -> Path:
        """Resolve a root-relative file path, raising ``PathEscapeError`` on escape."""
        resolved = (self._root / relative_path).resolve()
        if not self.is_within_root(resolved):
            raise PathEscapeError(relative_path, operation)
        return resolved

    def resolve(self, entity_path: str, operation: str | None = None) -> Path:
        """Map a logical entity path to its physical file."""
        resolved = (self._root / f"{entity_path}{self._extension}").resolve()
        if not self.is_within_root(resolved):
            raise PathEscapeError(entity_path, operation)
        return resolved

    def file_path(self, entity_path: str) -> str:
        """Root-relative file name for a logical entity path."""
        return f"{entity_path}{self._extension}"

    def entity_path(self, file_path: str) -> str | None:
        """Inverse of ``file_path``; ``None`` for files that are not entities."""
        if not file_path.endswith(self._extension):
            return None
        return file_path[: -len(self._extension)]
