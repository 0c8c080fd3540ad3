"""Entity Tools.

This module contains MCP tools for long-term memory entities:
- read_entity: Read an entity, optionally paginated by lines
- write_entity: Create or overwrite an entity
- list_entities: List entities, optionally filtered by path prefix
"""

from mcp.server import FastMCP

from ..logger_config import log_mcp_call
from ..memory import CognitiveMemory
from ..models import EntityContent
from ..models import WriteResult
from ..validation import require
from ..validation import validate_entity_path
from ..validation import validate_line_count


def register_entity_tools(mcp_server: FastMCP, memory: CognitiveMemory) -> None:
    """Register all entity tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def read_entity(
        entity_path: str,
        offset: int | None = None,
        limit: int | None = None,
        head: int | None = None,
        tail: int | None = None,
    ) -> EntityContent:
        """Read an entity from long-term memory, optionally paginated by lines.

        Large entities (for example a long session log) can be read in pieces.
        Only one selection style applies per call: offset/limit takes precedence
        when either is given, then tail, then head.

        Parameters:
            entity_path (str): Full logical path to the entity, without extension
                (e.g., 'people/john-doe', 'projects/mcp-servers')
            offset (Optional[int]): 0-based first line to return
            limit (Optional[int]): Maximum number of lines to return from offset
            head (Optional[int]): Return only the first N lines
            tail (Optional[int]): Return only the last N lines

        Returns:
            EntityContent:
                - path (str): The requested entity path
                - content (str): Selected lines joined with newlines
                - total_lines (int): Line count of the whole entity
                - returned_lines (int): Line count of ``content``
                - offset (Optional[int]): Effective offset for offset/limit reads

        Example Usage:
            ```json
            {
                "name": "read_entity",
                "arguments": {"entity_path": "current_session", "tail": 50}
            }
            ```

        Example Response:
            ```json
            {
                "path": "current_session",
                "content": "### INSIGHT - HIGH (2026-10-18T09:30:00.000Z)\\n...",
                "total_lines": 412,
                "returned_lines": 50,
                "offset": null
            }
            ```

        Fails if the entity does not exist or the path escapes the memory directory.
        """
        require(validate_entity_path(entity_path), "entity_path", entity_path)
        for name, value in (("offset", offset), ("limit", limit), ("head", head), ("tail", tail)):
            require(validate_line_count(value, name), name, value)
        return await memory.read_entity(entity_path, offset=offset, limit=limit, head=head, tail=tail)

    @mcp_server.tool()
    @log_mcp_call
    async def write_entity(entity_path: str, content: str) -> WriteResult:
        """Write an entity to long-term memory, replacing any existing content.

        Intermediate directories are created as needed.

        Parameters:
            entity_path (str): Full logical path to the entity
                (e.g., 'people/john-doe', 'concepts/learning')
            content (str): Complete markdown content of the entity

        Returns:
            WriteResult: ``{"success": true, "path": "<entity_path>"}``
        """
        require(validate_entity_path(entity_path), "entity_path", entity_path)
        return await memory.write_entity(entity_path, content)

    @mcp_server.tool()
    @log_mcp_call
    async def list_entities(filter_prefix: str = "") -> list[str]:
        """List all entities, or only those whose path starts with a prefix.

        The prefix is a literal string match (no globbing), e.g. 'people/'.
        Returns an empty list when nothing matches.
        """
        return await memory.list_entities(filter_prefix)
