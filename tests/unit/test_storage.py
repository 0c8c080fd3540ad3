"""Unit tests for the storage layer: path sandbox and local backend."""

import os

import pytest

from cognitive_memory.exceptions import PathEscapeError
from cognitive_memory.storage import LocalStorageBackend
from cognitive_memory.storage import PathSandbox


class TestPathSandbox:
    """Tests for logical path resolution and confinement."""

    def test_resolves_nested_entity_under_root(self, tmp_path):
        """Should map a logical path to <root>/<path>.md."""
        sandbox = PathSandbox(tmp_path)
        assert sandbox.resolve("people/john-doe") == (tmp_path / "people" / "john-doe.md").resolve()

    def test_dot_dot_inside_root_is_allowed(self, tmp_path):
        """Should allow '..' segments that stay inside the root."""
        sandbox = PathSandbox(tmp_path)
        assert sandbox.resolve("people/../notes") == (tmp_path / "notes.md").resolve()

    @pytest.mark.parametrize("entity_path", ["../outside", "a/../../outside", "../../etc/passwd"])
    def test_dot_dot_escape_rejected(self, tmp_path, entity_path):
        """Should reject paths that climb out of the root."""
        sandbox = PathSandbox(tmp_path / "root")
        with pytest.raises(PathEscapeError) as exc_info:
            sandbox.resolve(entity_path, "read")
        assert exc_info.value.entity_path == entity_path
        assert exc_info.value.details["operation"] == "read"

    def test_absolute_path_rejected(self, tmp_path):
        """Should reject absolute paths pointing elsewhere."""
        sandbox = PathSandbox(tmp_path / "root")
        with pytest.raises(PathEscapeError):
            sandbox.resolve("/etc/passwd")

    def test_sibling_with_common_prefix_rejected(self, tmp_path):
        """Should not treat '/root-evil' as inside '/root'."""
        (tmp_path / "root").mkdir()
        sandbox = PathSandbox(tmp_path / "root")
        with pytest.raises(PathEscapeError):
            sandbox.resolve("../root-evil/secret")

    def test_symlink_escape_rejected(self, tmp_path):
        """Should reject a path routed through a symlink leaving the root."""
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        os.symlink(outside, root / "link")
        sandbox = PathSandbox(root)
        with pytest.raises(PathEscapeError):
            sandbox.resolve("link/secret")

    def test_entity_path_round_trip(self, tmp_path):
        """Should strip the extension and ignore other files."""
        sandbox = PathSandbox(tmp_path)
        assert sandbox.entity_path(sandbox.file_path("people/jane")) == "people/jane"
        assert sandbox.entity_path("notes.txt") is None


class TestLocalStorageBackend:
    """Tests for local filesystem storage backend."""

    @pytest.fixture
    def storage(self, tmp_path):
        return LocalStorageBackend(root_dir=tmp_path)

    @pytest.mark.asyncio
    async def test_backend_type(self, storage):
        """Should report correct backend type."""
        assert storage.backend_type == "local"

    @pytest.mark.asyncio
    async def test_write_creates_directories_and_reads_back(self, storage, tmp_path):
        """Should create intermediate directories on write."""
        await storage.write_file("a/b/c.md", "# Deep")
        assert (tmp_path / "a" / "b" / "c.md").is_file()
        assert await storage.read_file("a/b/c.md") == "# Deep"

    @pytest.mark.asyncio
    async def test_line_endings_preserved(self, storage, tmp_path):
        """Should not translate line endings."""
        await storage.write_file("crlf.md", "one\r\ntwo\n")
        assert (tmp_path / "crlf.md").read_bytes() == b"one\r\ntwo\n"
        assert await storage.read_file("crlf.md") == "one\r\ntwo\n"

    @pytest.mark.asyncio
    async def test_read_missing_raises_file_not_found(self, storage):
        """Should raise FileNotFoundError for missing files."""
        with pytest.raises(FileNotFoundError):
            await storage.read_file("missing.md")

    @pytest.mark.asyncio
    async def test_read_directory_raises_file_not_found(self, storage, tmp_path):
        """Should treat a directory as a missing file."""
        (tmp_path / "folder.md").mkdir()
        with pytest.raises(FileNotFoundError):
            await storage.read_file("folder.md")

    @pytest.mark.asyncio
    async def test_get_file_info(self, storage):
        """Should report size and content type."""
        await storage.write_file("info.md", "12345")
        info = await storage.get_file_info("info.md")
        assert info.size == 5
        assert info.content_type == "text/markdown"
        assert info.is_directory is False
        assert await storage.get_file_info("nope.md") is None

    @pytest.mark.asyncio
    async def test_list_files_recursive_and_pattern(self, storage):
        """Should list matching files, recursing only when asked."""
        await storage.write_file("top.md", "x")
        await storage.write_file("nested/inner.md", "x")
        await storage.write_file("nested/notes.txt", "x")

        assert await storage.list_files() == ["top.md"]
        assert await storage.list_files(recursive=True) == ["nested/inner.md", "top.md"]

    @pytest.mark.asyncio
    async def test_list_files_missing_root_is_empty(self, tmp_path):
        """Should list nothing when the root does not exist yet."""
        storage = LocalStorageBackend(root_dir=tmp_path / "not-created")
        assert await storage.list_files(recursive=True) == []

    @pytest.mark.asyncio
    async def test_list_files_skips_symlinks_leaving_root(self, tmp_path):
        """Should not list files reached through an escaping symlink."""
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        (outside / "secret.md").write_text("secret", encoding="utf-8")
        os.symlink(outside / "secret.md", root / "secret.md")
        storage = LocalStorageBackend(root_dir=root)
        assert await storage.list_files(recursive=True) == []

    @pytest.mark.asyncio
    async def test_move_file(self, storage):
        """Should move files and create the destination directory."""
        await storage.write_file("old.md", "content")
        await storage.move_file("old.md", "archive/new.md")
        assert not await storage.file_exists("old.md")
        assert await storage.read_file("archive/new.md") == "content"

    @pytest.mark.asyncio
    async def test_move_missing_source(self, storage):
        """Should raise FileNotFoundError when the source is missing."""
        with pytest.raises(FileNotFoundError):
            await storage.move_file("ghost.md", "other.md")

    @pytest.mark.asyncio
    async def test_escaping_path_rejected(self, storage):
        """Should refuse file access outside the root."""
        with pytest.raises(PathEscapeError):
            await storage.write_file("../escape.md", "x")
