"""Unit tests for CognitiveMemory operations."""

import pytest

from cognitive_memory.exceptions import EntityNotFoundError
from cognitive_memory.exceptions import PathEscapeError
from cognitive_memory.memory import CognitiveMemory
from cognitive_memory.memory import render_note
from cognitive_memory.memory import render_reflection
from cognitive_memory.models import EntitySpec
from cognitive_memory.sections import INSTRUCTIONS_PREAMBLE

TIMESTAMP = "2026-10-18T09:30:00.000Z"


class TestRenderers:
    def test_render_note(self):
        assert render_note("insight", "high", "Users prefer X", TIMESTAMP) == (
            f"\n### INSIGHT - HIGH ({TIMESTAMP})\nUsers prefer X\n"
        )

    def test_reflection_minimal(self):
        text = render_reflection("daily", ["a", "b"], TIMESTAMP)
        assert text.startswith(f"\n# Daily Reflection - {TIMESTAMP}\n\n## Key Insights\n- a\n- b\n")
        assert "Context from Anchors" not in text
        assert "Cognitive Growth Observed" not in text
        assert "Future Development Focus" not in text
        assert text.endswith("---\n*Generated via Dream Tool for meta-cognitive development*\n\n")

    def test_reflection_with_optional_parts(self):
        text = render_reflection(
            "project", ["a"], TIMESTAMP, anchor_count=4, cognitive_growth="grew", future_focus="focus"
        )
        assert "## Context from Anchors\nActive entities: 4 referenced\n" in text
        assert "## Cognitive Growth Observed\ngrew\n" in text
        assert "## Future Development Focus\nfocus\n" in text


class TestSessionNotes:
    @pytest.mark.asyncio
    async def test_first_note_creates_session(self, memory, store):
        result = await memory.add_note("insight", "Users prefer X", "high")
        assert result.success is True
        assert result.message == "insight note added to session"
        assert await store.read("current_session") == (
            f"# Current Session\n\n### INSIGHT - HIGH ({TIMESTAMP})\nUsers prefer X\n"
        )

    @pytest.mark.asyncio
    async def test_notes_append_in_order(self, memory, store):
        await memory.add_note("context", "first")
        await memory.add_note("decision", "second", "low")
        session = await store.read("current_session")
        assert session.index("CONTEXT - MEDIUM") < session.index("DECISION - LOW")


class TestEntities:
    @pytest.mark.asyncio
    async def test_write_then_read_full(self, memory):
        written = await memory.write_entity("people/jane", "# Jane\nline 2")
        assert written.success is True
        assert written.path == "people/jane"

        content = await memory.read_entity("people/jane")
        assert content.content == "# Jane\nline 2"
        assert content.total_lines == 2
        assert content.returned_lines == 2
        assert content.offset is None

    @pytest.mark.asyncio
    async def test_non_ascii_round_trip(self, memory):
        content = "日本語 — ñ\r\n🙂"
        await memory.write_entity("people/josé", content)
        result = await memory.read_entity("people/josé")
        assert result.content == content
        assert result.total_lines == 2

    @pytest.mark.asyncio
    async def test_read_paginated(self, memory):
        await memory.write_entity("log", "\n".join(str(i) for i in range(20)))
        page = await memory.read_entity("log", offset=5, limit=2)
        assert page.content == "5\n6"
        assert page.offset == 5
        assert (await memory.read_entity("log", tail=1)).content == "19"
        assert (await memory.read_entity("log", head=1)).content == "0"

    @pytest.mark.asyncio
    async def test_read_missing(self, memory):
        with pytest.raises(EntityNotFoundError):
            await memory.read_entity("nobody")

    @pytest.mark.asyncio
    async def test_list_entities(self, memory):
        await memory.write_entity("people/jane", "x")
        await memory.write_entity("projects/mcp", "x")
        assert await memory.list_entities("people/") == ["people/jane"]


class TestReflect:
    @pytest.mark.asyncio
    async def test_first_reflection_creates_journal(self, memory, store):
        result = await memory.reflect("daily", ["insight one"])
        assert result.success is True
        assert result.rotated is False
        assert result.archived_to is None
        assert result.message == "daily reflection saved to dream journal"
        journal = await store.read("dream_journal")
        assert journal.startswith("# Dream Journal\n\n# Daily Reflection - ")

    @pytest.mark.asyncio
    async def test_reflection_counts_ledger_references(self, memory, store):
        await memory.consolidate([EntitySpec(path="a", content="x", summary="s")])
        await memory.reflect("session", ["i"])
        assert "Active entities: 1 referenced" in await store.read("dream_journal")

    @pytest.mark.asyncio
    async def test_rotation_reported(self, store, fixed_clock):
        memory = CognitiveMemory(store, clock=fixed_clock, rotation_threshold_bytes=2048)
        await store.write("dream_journal", "j" * 2048)

        result = await memory.reflect("daily", ["i"])

        assert result.rotated is True
        assert result.archived_to == "dream_journal_2026-10-18"
        assert result.message == "daily reflection saved; journal rotated (was 2KB)"
        journal = await store.read("dream_journal")
        assert journal.startswith(
            "# Dream Journal\n\n*Previous journal archived to: dream_journal_2026-10-18*\n\n"
        )


class TestConsolidate:
    @pytest.mark.asyncio
    async def test_result_and_message(self, memory, store):
        await store.write("current_session", "# Current Session\n" + "n" * 300)
        result = await memory.consolidate(
            [
                EntitySpec(path="people/jane", content="# Jane", summary="Jane"),
                EntitySpec(path="concepts/tdd", content="# TDD", summary="TDD"),
            ]
        )
        assert result.success is True
        assert result.entities_created == ["people/jane", "concepts/tdd"]
        assert result.session_reset is True
        assert result.session_archived is True
        assert result.archive_path == "session_archives/2026-10-18"
        assert result.context_anchors_updated is True
        assert result.message == (
            "Consolidation complete: 2 entities created/updated, "
            "session archived to session_archives/2026-10-18"
        )

    @pytest.mark.asyncio
    async def test_escape_aborts_whole_batch(self, memory, store):
        with pytest.raises(PathEscapeError):
            await memory.consolidate([EntitySpec(path="../out", content="x", summary="s")])
        assert await store.list_entities() == []


class TestUpdateInstructions:
    @pytest.mark.asyncio
    async def test_creates_document(self, memory, store):
        result = await memory.update_instructions("Be brief.", "users asked")
        assert result.action == "created"
        assert result.section_updated == "Behavioral Learnings"
        assert result.message == "Base instructions created: Behavioral Learnings"
        me = await store.read("me")
        assert me.startswith(INSTRUCTIONS_PREAMBLE)
        assert "### Behavioral Learnings - Updated 2026-10-18\n\n**Rationale**: users asked\n\nBe brief.\n" in me

    @pytest.mark.asyncio
    async def test_replace_and_append(self, memory, store):
        await memory.update_instructions("v1", "r", "Style")
        await memory.update_instructions("other", "r", "Tone")
        replaced = await memory.update_instructions("v2", "r", "Style")

        assert replaced.action == "replaced"
        assert replaced.message == "Base instructions updated: Style"
        me = await store.read("me")
        assert "v1" not in me
        assert me.index("### Style") < me.index("### Tone")
        assert me.count("### Style") == 1
