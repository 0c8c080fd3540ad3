"""Session Tools.

This module contains MCP tools for the working session:
- add_note: Append a typed, importance-tagged note to the current session
- consolidate: Commit session learnings as entities and reset the session
"""

from mcp.server import FastMCP

from ..logger_config import log_mcp_call
from ..memory import CognitiveMemory
from ..models import ConsolidationResult
from ..models import EntitySpec
from ..models import Importance
from ..models import NoteType
from ..models import OperationStatus
from ..validation import require
from ..validation import validate_entity_batch


def register_session_tools(mcp_server: FastMCP, memory: CognitiveMemory) -> None:
    """Register all session tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def add_note(note_type: NoteType, content: str, importance: Importance = "medium") -> OperationStatus:
        """Add a contextual note to the current session.

        Parameters:
            note_type (str): One of 'context', 'insight', 'decision'
            content (str): Note content to append to the current session
            importance (str): One of 'low', 'medium' (default), 'high'

        Returns:
            OperationStatus: ``{"success": true, "message": "insight note added to session"}``
        """
        return await memory.add_note(note_type, content, importance)

    @mcp_server.tool()
    @log_mcp_call
    async def consolidate(entities: list[EntitySpec]) -> ConsolidationResult:
        """Create/update entities from session learnings, then reset the session.

        Steps, in order:
        1. Write every entity (nothing else happens if any write fails)
        2. Add one dated entry listing every ``path: summary`` to context_anchors
        3. Archive the current session to session_archives/<date> if it has content
        4. Reset current_session to a fresh template

        Parameters:
            entities (List[EntitySpec]): Entities to write, each with
                - path (str): Entity path (e.g., "concepts/new-pattern")
                - content (str): Full markdown content
                - summary (str): One-line summary for the context anchors ledger

        Example Usage:
            ```json
            {
                "name": "consolidate",
                "arguments": {
                    "entities": [
                        {
                            "path": "concepts/test-first",
                            "content": "# Test First\\n\\nWrite the failing test before the fix.",
                            "summary": "Test-first workflow"
                        }
                    ]
                }
            }
            ```

        Returns:
            ConsolidationResult with the written paths, whether and where the
            session was archived, and confirmation that the ledger was updated.
        """
        require(validate_entity_batch(entities), "entities")
        return await memory.consolidate(entities)
