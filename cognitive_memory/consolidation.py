"""Batch consolidation of session learnings into entities.

One run writes every entity in the batch, records the batch in the context
anchors ledger, archives the working session if it holds anything beyond its
header, and resets the session document.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field

from .helpers import LEDGER_ENTITY
from .helpers import SESSION_ARCHIVE_PREFIX
from .helpers import SESSION_ENTITY
from .helpers import date_stamp
from .helpers import iso_timestamp
from .models import EntitySpec
from .rotation import next_free_path
from .store import DocumentStore

logger = logging.getLogger(__name__)

LEDGER_TITLE = "# Context Anchors"
LEDGER_HEADER = f"{LEDGER_TITLE}\n\n"
SESSION_PREAMBLE = "# Current Session\n"

# "- **people/jane**: summary" from consolidation, "**Entity Path**: ..." from older ledgers
_LEDGER_REFERENCE = re.compile(r"^(?:- \*\*.+?\*\*: |\*\*Entity Path\*\*: ).*", re.MULTILINE)


@dataclass(frozen=True)
class ConsolidationOutcome:
    written: list[str] = field(default_factory=list)
    ledger_updated: bool = False
    session_archived: bool = False
    archive_path: str | None = None


def render_ledger_entry(entities: Sequence[EntitySpec], timestamp: str) -> str:
    references = "\n".join(f"- **{entity.path}**: {entity.summary}" for entity in entities)
    return f"\n## Consolidation - {timestamp}\n{references}\n\n---\n\n"


def ledger_header_length(content: str) -> int | None:
    """Length of the ledger header (title through its first blank line), if present."""
    if not content.startswith(LEDGER_TITLE):
        return None
    blank = content.find("\n\n")
    if blank == -1:
        return None
    return blank + 2


def insert_ledger_entry(existing: str | None, entry: str) -> str:
    """Place ``entry`` directly after the ledger header, above older entries."""
    if existing is None:
        return LEDGER_HEADER + entry
    header_length = ledger_header_length(existing)
    if header_length is None:
        return entry + existing
    return existing[:header_length] + entry + existing[header_length:]


def count_ledger_references(content: str) -> int:
    return len(_LEDGER_REFERENCE.findall(content))


def render_session_reset(date: str, archive_path: str | None) -> str:
    archived_line = f"*Session archived to: {archive_path}*" if archive_path else ""
    return (
        f"{SESSION_PREAMBLE}\n"
        f"*Session reset on {date} after consolidation*\n"
        "*Previous session content integrated into structured entities*\n"
        f"{archived_line}\n"
        "\n"
    )


class ConsolidationWorkflow:
    """Runs the write / ledger / archive / reset sequence against a store."""

    def __init__(self, store: DocumentStore, session_archive_min_chars: int = 200):
        self.store = store
        self.session_archive_min_chars = session_archive_min_chars

    async def write_entities(self, entities: Sequence[EntitySpec]) -> list[str]:
        # Confinement is checked for the whole batch before anything is written
        for entity in entities:
            self.store.validate(entity.path, "write")
        written = []
        for entity in entities:
            await self.store.write(entity.path, entity.content)
            written.append(entity.path)
        return written

    async def update_ledger(self, entities: Sequence[EntitySpec], timestamp: str) -> None:
        existing = await self.store.try_read(LEDGER_ENTITY)
        entry = render_ledger_entry(entities, timestamp)
        await self.store.write(LEDGER_ENTITY, insert_ledger_entry(existing, entry))

    async def archive_session(self, date: str) -> str | None:
        """Copy the session to a dated archive; ``None`` when there is nothing worth keeping."""
        session = await self.store.try_read(SESSION_ENTITY)
        if session is None or len(session) <= self.session_archive_min_chars:
            return None
        archive_path = await next_free_path(self.store, f"{SESSION_ARCHIVE_PREFIX}/{date}")
        await self.store.write(archive_path, session)
        logger.info("Archived session (%d chars) to %s", len(session), archive_path)
        return archive_path

    async def reset_session(self, date: str, archive_path: str | None) -> None:
        await self.store.write(SESSION_ENTITY, render_session_reset(date, archive_path))

    async def run(self, entities: Sequence[EntitySpec], now: datetime.datetime) -> ConsolidationOutcome:
        """Execute every step in order.

        A failure while writing the batch aborts before the ledger or session is
        touched. Later steps are not rolled back if a subsequent step fails.
        """
        written = await self.write_entities(entities)

        date = date_stamp(now)
        await self.update_ledger(entities, iso_timestamp(now))
        archive_path = await self.archive_session(date)
        await self.reset_session(date, archive_path)

        return ConsolidationOutcome(
            written=written,
            ledger_updated=True,
            session_archived=archive_path is not None,
            archive_path=archive_path,
        )
