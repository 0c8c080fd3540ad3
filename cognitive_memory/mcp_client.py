"""Clean client interface for cognitive memory tools.

This module provides a Python interface to the tools registered on a server
built by ``create_server``, so tests and scripts can call them in-process
without a transport. Calls go through the registered tool functions, so the
same argument checks and call logging apply.
"""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any

from mcp.server import FastMCP

from .helpers import DEFAULT_INSTRUCTIONS_SECTION
from .models import EntitySpec


class MemoryToolClient:
    """Async wrappers around each registered cognitive memory tool."""

    def __init__(self, mcp_server: FastMCP):
        self.mcp_server = mcp_server

    def _get_mcp_tool(self, tool_name: str):
        """Get a registered MCP tool function by name."""
        if (
            hasattr(self.mcp_server, "_tool_manager")
            and hasattr(self.mcp_server._tool_manager, "_tools")
            and tool_name in self.mcp_server._tool_manager._tools
        ):
            tool = self.mcp_server._tool_manager._tools[tool_name]
            if hasattr(tool, "fn"):
                return tool.fn
        raise RuntimeError(f"MCP tool '{tool_name}' not found or not properly registered")

    @property
    def tool_names(self) -> list[str]:
        return sorted(self.mcp_server._tool_manager._tools)

    # Session tools
    async def add_note(self, note_type: str, content: str, importance: str = "medium"):
        """Append a note to the current session."""
        return await self._get_mcp_tool("add_note")(note_type, content, importance)

    async def consolidate(self, entities: Sequence[EntitySpec | Mapping[str, Any]]):
        """Write entities, update the ledger and reset the session."""
        specs = [e if isinstance(e, EntitySpec) else EntitySpec.model_validate(e) for e in entities]
        return await self._get_mcp_tool("consolidate")(specs)

    # Entity tools
    async def read_entity(
        self,
        entity_path: str,
        offset: int | None = None,
        limit: int | None = None,
        head: int | None = None,
        tail: int | None = None,
    ):
        """Read an entity, optionally paginated."""
        return await self._get_mcp_tool("read_entity")(entity_path, offset, limit, head, tail)

    async def write_entity(self, entity_path: str, content: str):
        """Create or overwrite an entity."""
        return await self._get_mcp_tool("write_entity")(entity_path, content)

    async def list_entities(self, filter_prefix: str = ""):
        """List entity paths, optionally filtered by prefix."""
        return await self._get_mcp_tool("list_entities")(filter_prefix)

    # Learning tools
    async def reflect(
        self,
        reflection_type: str,
        key_insights: list[str],
        cognitive_growth: str | None = None,
        future_focus: str | None = None,
    ):
        """Append a reflection to the dream journal."""
        return await self._get_mcp_tool("reflect")(reflection_type, key_insights, cognitive_growth, future_focus)

    async def update_instructions(self, content: str, rationale: str, section: str = DEFAULT_INSTRUCTIONS_SECTION):
        """Create or replace a section of the base instructions."""
        return await self._get_mcp_tool("update_instructions")(content, rationale, section)
