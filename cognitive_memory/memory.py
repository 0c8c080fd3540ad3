"""Cognitive memory operations.

``CognitiveMemory`` is what the MCP tools call into. It owns no state besides
its collaborators: the document store, the clock and a few thresholds taken
from settings at construction time.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .consolidation import ConsolidationWorkflow
from .consolidation import SESSION_PREAMBLE
from .consolidation import count_ledger_references
from .helpers import DEFAULT_INSTRUCTIONS_SECTION
from .helpers import INSTRUCTIONS_ENTITY
from .helpers import JOURNAL_ENTITY
from .helpers import LEDGER_ENTITY
from .helpers import SESSION_ENTITY
from .helpers import Clock
from .helpers import capitalize_first
from .helpers import date_stamp
from .helpers import iso_timestamp
from .helpers import utc_now
from .models import ConsolidationResult
from .models import EntityContent
from .models import EntitySpec
from .models import InstructionUpdateResult
from .models import OperationStatus
from .models import ReflectionResult
from .models import WriteResult
from .pagination import select_lines
from .rotation import DEFAULT_ROTATION_THRESHOLD
from .rotation import RotationManager
from .sections import merge_section
from .store import DocumentStore

logger = logging.getLogger(__name__)

JOURNAL_TITLE = "Dream Journal"
REFLECTION_FOOTER = "*Generated via Dream Tool for meta-cognitive development*"


def render_note(note_type: str, importance: str, content: str, timestamp: str) -> str:
    return f"\n### {note_type.upper()} - {importance.upper()} ({timestamp})\n{content}\n"


def render_reflection(
    reflection_type: str,
    key_insights: Sequence[str],
    timestamp: str,
    anchor_count: int = 0,
    cognitive_growth: str | None = None,
    future_focus: str | None = None,
) -> str:
    insights = "\n".join(f"- {insight}" for insight in key_insights)
    anchors = f"\n## Context from Anchors\nActive entities: {anchor_count} referenced\n" if anchor_count else ""
    growth = f"## Cognitive Growth Observed\n{cognitive_growth}\n" if cognitive_growth else ""
    focus = f"## Future Development Focus\n{future_focus}\n" if future_focus else ""
    return (
        f"\n# {capitalize_first(reflection_type)} Reflection - {timestamp}\n"
        "\n"
        "## Key Insights\n"
        f"{insights}\n"
        f"{anchors}\n"
        f"{growth}\n"
        "\n"
        f"{focus}\n"
        "\n"
        "---\n"
        f"{REFLECTION_FOOTER}\n"
        "\n"
    )


class CognitiveMemory:
    """Session notes, entities, reflections, consolidation and base instructions."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Clock = utc_now,
        rotation_threshold_bytes: int = DEFAULT_ROTATION_THRESHOLD,
        session_archive_min_chars: int = 200,
    ):
        self.store = store
        self.clock = clock
        self.journal = RotationManager(store, JOURNAL_ENTITY, JOURNAL_TITLE, rotation_threshold_bytes)
        self.consolidation = ConsolidationWorkflow(store, session_archive_min_chars)

    @classmethod
    def from_settings(cls, settings, clock: Clock | None = None) -> CognitiveMemory:
        return cls(
            DocumentStore.from_settings(settings),
            clock=clock or utc_now,
            rotation_threshold_bytes=settings.rotation_threshold_bytes,
            session_archive_min_chars=settings.session_archive_min_chars,
        )

    # --- Session notes ---

    async def add_note(self, note_type: str, content: str, importance: str = "medium") -> OperationStatus:
        note = render_note(note_type, importance, content, iso_timestamp(self.clock()))
        session = await self.store.try_read(SESSION_ENTITY)
        if session is None:
            session = SESSION_PREAMBLE
        await self.store.write(SESSION_ENTITY, session + note)
        return OperationStatus(success=True, message=f"{note_type} note added to session")

    # --- Entities ---

    async def read_entity(
        self,
        path: str,
        offset: int | None = None,
        limit: int | None = None,
        head: int | None = None,
        tail: int | None = None,
    ) -> EntityContent:
        content = await self.store.read(path)
        selection = select_lines(content, offset=offset, limit=limit, head=head, tail=tail)
        return EntityContent(
            path=path,
            content=selection.content,
            total_lines=selection.total_lines,
            returned_lines=selection.returned_lines,
            offset=selection.offset,
        )

    async def write_entity(self, path: str, content: str) -> WriteResult:
        await self.store.write(path, content)
        return WriteResult(success=True, path=path)

    async def list_entities(self, filter_prefix: str = "") -> list[str]:
        return await self.store.list_entities(filter_prefix)

    # --- Dream journal ---

    async def reflect(
        self,
        reflection_type: str,
        key_insights: Sequence[str],
        cognitive_growth: str | None = None,
        future_focus: str | None = None,
    ) -> ReflectionResult:
        now = self.clock()
        ledger = await self.store.try_read(LEDGER_ENTITY)
        anchor_count = count_ledger_references(ledger) if ledger is not None else 0

        reflection = render_reflection(
            reflection_type,
            key_insights,
            iso_timestamp(now),
            anchor_count=anchor_count,
            cognitive_growth=cognitive_growth,
            future_focus=future_focus,
        )
        outcome = await self.journal.append(reflection, date_stamp(now))

        if outcome.rotated:
            return ReflectionResult(
                success=True,
                message=(
                    f"{reflection_type} reflection saved; journal rotated "
                    f"(was {round(outcome.previous_size / 1024)}KB)"
                ),
                rotated=True,
                archived_to=outcome.archived_to,
            )
        return ReflectionResult(
            success=True,
            message=f"{reflection_type} reflection saved to dream journal",
            rotated=False,
        )

    # --- Consolidation ---

    async def consolidate(self, entities: Sequence[EntitySpec]) -> ConsolidationResult:
        outcome = await self.consolidation.run(entities, self.clock())

        message = f"Consolidation complete: {len(outcome.written)} entities created/updated"
        if outcome.session_archived:
            message += f", session archived to {outcome.archive_path}"
        return ConsolidationResult(
            success=True,
            message=message,
            entities_created=outcome.written,
            session_reset=True,
            session_archived=outcome.session_archived,
            archive_path=outcome.archive_path,
            context_anchors_updated=outcome.ledger_updated,
        )

    # --- Base instructions ---

    async def update_instructions(
        self,
        content: str,
        rationale: str,
        section: str = DEFAULT_INSTRUCTIONS_SECTION,
    ) -> InstructionUpdateResult:
        existing = await self.store.try_read(INSTRUCTIONS_ENTITY)
        merged = merge_section(existing, section, content, rationale, date_stamp(self.clock()))
        await self.store.write(INSTRUCTIONS_ENTITY, merged.content)

        verb = "created" if merged.action == "created" else "updated"
        logger.info("Base instructions %s: %s (%s)", verb, section, merged.action)
        return InstructionUpdateResult(
            success=True,
            message=f"Base instructions {verb}: {section}",
            section_updated=section,
            action=merged.action,
        )
