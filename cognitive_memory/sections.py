"""Named, dated sections inside the base instructions document.

A section block has a fixed shape::

    ### <section> - Updated <YYYY-MM-DD>

    **Rationale**: <rationale>

    <body>

    ---

A block is found by scanning lines: its header is the first ``### `` line whose
title is the section name, optionally followed by `` - <anything>``. The block
runs until the next ``---`` line (consumed with the block), the next heading of
level 1 to 3 (kept), or the end of the document. Deeper sub-headings such as
``#### Detail``, ``#tag`` lines and mid-line ``---`` stay inside the block.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

SECTION_DELIMITER = "---"
HEADER_PREFIX = "### "
# Headings at or above the section level close a block
_BLOCK_END_HEADING = re.compile(r"#{1,3} ")

INSTRUCTIONS_PREAMBLE = (
    "# Base Instructions (me.md)\n"
    "\n"
    "*This file contains behavioral learnings that have been integrated into the base prompt.*\n"
    "*Interface files (CLAUDE.md, custom_modes.yaml, etc.) should reference this location.*\n"
    "\n"
)

MergeAction = Literal["created", "replaced", "appended"]


@dataclass(frozen=True)
class SectionMergeResult:
    content: str
    action: MergeAction


def render_section(section: str, body: str, rationale: str, date: str) -> str:
    """Build one section block, ending with the delimiter line."""
    return (
        f"{HEADER_PREFIX}{section} - Updated {date}\n"
        "\n"
        f"**Rationale**: {rationale}\n"
        "\n"
        f"{body}\n"
        "\n"
        f"{SECTION_DELIMITER}\n"
    )


def _iter_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, line)`` pairs, each line keeping its ``\\n``."""
    pos = 0
    while pos < len(content):
        newline = content.find("\n", pos)
        end = len(content) if newline == -1 else newline + 1
        yield pos, content[pos:end]
        pos = end


def is_section_header(line: str, section: str) -> bool:
    """True if ``line`` is the header of ``section``, whatever its date suffix."""
    if not line.startswith(HEADER_PREFIX):
        return False
    title = line[len(HEADER_PREFIX):].rstrip()
    return title == section or title.startswith(f"{section} - ")


def find_section(content: str, section: str) -> tuple[int, int] | None:
    """Character span ``[start, end)`` of the first block for ``section``."""
    start = None
    for offset, line in _iter_lines(content):
        text = line.rstrip("\r\n")
        if start is None:
            if is_section_header(text, section):
                start = offset
            continue
        if text.rstrip() == SECTION_DELIMITER:
            return start, offset + len(line)
        if _BLOCK_END_HEADING.match(text):
            return start, offset
    if start is None:
        return None
    return start, len(content)


def merge_section(
    existing: str | None,
    section: str,
    body: str,
    rationale: str,
    date: str,
) -> SectionMergeResult:
    """Create, replace or append ``section`` in the instructions document.

    ``existing`` is ``None`` when the document does not exist yet. Content
    outside the replaced block is preserved byte-for-byte.
    """
    block = render_section(section, body, rationale, date)

    if existing is None:
        return SectionMergeResult(INSTRUCTIONS_PREAMBLE + "\n" + block + "\n", "created")

    span = find_section(existing, section)
    if span is None:
        return SectionMergeResult(existing + "\n" + block + "\n", "appended")

    start, end = span
    return SectionMergeResult(existing[:start] + block + existing[end:], "replaced")
