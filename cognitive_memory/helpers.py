"""Shared constants and small helpers for the cognitive memory server.

Holds the fixed logical names of the designated documents, the injectable
clock, and timestamp formatting used by every document template.
"""

import datetime
from collections.abc import Callable

# --- Designated documents (logical paths, no extension) ---

INSTRUCTIONS_ENTITY = "me"
SESSION_ENTITY = "current_session"
LEDGER_ENTITY = "context_anchors"
JOURNAL_ENTITY = "dream_journal"
SESSION_ARCHIVE_PREFIX = "session_archives"

DEFAULT_INSTRUCTIONS_SECTION = "Behavioral Learnings"

# --- Clock ---

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.datetime.now(datetime.timezone.utc)


def iso_timestamp(moment: datetime.datetime) -> str:
    """Format as ``2026-10-18T09:30:00.000Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    utc = moment.astimezone(datetime.timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def date_stamp(moment: datetime.datetime) -> str:
    """Calendar date (UTC) used in archive names and section headers."""
    return iso_timestamp(moment).split("T")[0]


# --- Text helpers ---


def split_lines(content: str) -> list[str]:
    """Split on line feeds only; a trailing newline yields a final empty line."""
    return content.split("\n")


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]
