"""Line-oriented pagination of entity content.

Content is split on line feeds only. A document ending in ``\\n`` therefore has
a final empty line, and an empty document has exactly one (empty) line.
"""

from __future__ import annotations

from dataclasses import dataclass

from .helpers import split_lines


@dataclass(frozen=True)
class LineSlice:
    """A contiguous run of lines plus where it sits in the whole document."""

    content: str
    total_lines: int
    returned_lines: int
    offset: int | None = None


def _make_slice(lines: list[str], total: int, offset: int | None = None) -> LineSlice:
    return LineSlice(
        content="\n".join(lines),
        total_lines=total,
        returned_lines=len(lines),
        offset=offset,
    )


def head_lines(content: str, count: int) -> LineSlice:
    """First ``count`` lines (all of them if the document is shorter)."""
    lines = split_lines(content)
    return _make_slice(lines[: max(count, 0)], len(lines))


def tail_lines(content: str, count: int) -> LineSlice:
    """Last ``count`` lines (all of them if the document is shorter)."""
    lines = split_lines(content)
    if count <= 0:
        return _make_slice([], len(lines))
    return _make_slice(lines[-count:], len(lines))


def slice_lines(content: str, offset: int = 0, limit: int | None = None) -> LineSlice:
    """Lines from ``offset`` (0-based), at most ``limit`` of them.

    An offset at or past the end yields an empty slice, not an error.
    """
    lines = split_lines(content)
    start = max(offset, 0)
    end = len(lines) if limit is None else start + max(limit, 0)
    return _make_slice(lines[start:end], len(lines), offset=start)


def select_lines(
    content: str,
    offset: int | None = None,
    limit: int | None = None,
    head: int | None = None,
    tail: int | None = None,
) -> LineSlice:
    """Apply whichever selection style the caller asked for.

    offset/limit wins when either is given, then tail, then head; with no
    selector every line is returned.
    """
    if offset is not None or limit is not None:
        return slice_lines(content, offset or 0, limit)
    if tail is not None:
        return tail_lines(content, tail)
    if head is not None:
        return head_lines(content, head)
    lines = split_lines(content)
    return _make_slice(lines, len(lines))
