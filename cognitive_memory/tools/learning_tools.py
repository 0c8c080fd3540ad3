"""Learning Tools.

This module contains MCP tools for long-lived reflection and instructions:
- reflect: Append a reflection to the dream journal, rotating it when large
- update_instructions: Create or replace a named section of the base instructions
"""

from mcp.server import FastMCP

from ..helpers import DEFAULT_INSTRUCTIONS_SECTION
from ..logger_config import log_mcp_call
from ..memory import CognitiveMemory
from ..models import InstructionUpdateResult
from ..models import ReflectionResult
from ..models import ReflectionType
from ..validation import require
from ..validation import validate_key_insights
from ..validation import validate_non_empty


def register_learning_tools(mcp_server: FastMCP, memory: CognitiveMemory) -> None:
    """Register reflection and base-instruction tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def reflect(
        reflection_type: ReflectionType,
        key_insights: list[str],
        cognitive_growth: str | None = None,
        future_focus: str | None = None,
    ) -> ReflectionResult:
        """Append a synthesized reflection to the dream journal.

        The reflection notes how many entities the context anchors ledger
        references. When the journal has grown past the rotation threshold
        (1 MiB by default) it is first archived to ``dream_journal_<date>`` and
        a fresh journal pointing at the archive is started.

        Parameters:
            reflection_type (str): One of 'daily', 'session', 'project'
            key_insights (List[str]): Key insights from the period
            cognitive_growth (Optional[str]): Observed growth patterns
            future_focus (Optional[str]): Areas for future focus

        Returns:
            ReflectionResult: success, message, ``rotated`` and, after a
            rotation, ``archived_to`` (the archive's entity path)
        """
        require(validate_key_insights(key_insights), "key_insights")
        return await memory.reflect(reflection_type, key_insights, cognitive_growth, future_focus)

    @mcp_server.tool()
    @log_mcp_call
    async def update_instructions(
        content: str,
        rationale: str,
        section: str = DEFAULT_INSTRUCTIONS_SECTION,
    ) -> InstructionUpdateResult:
        """Update the base behavioral instructions (me.md) with a validated pattern.

        An existing section with the same name is replaced in place; otherwise
        the section is appended. Other sections are left untouched.

        Parameters:
            content (str): New content for the section (markdown)
            rationale (str): Why this learning belongs in the base instructions
            section (str): Section name (default "Behavioral Learnings")

        Returns:
            InstructionUpdateResult: success, message, section_updated and
            action ('created', 'replaced' or 'appended')
        """
        require(validate_non_empty(section, "section"), "section", section)
        return await memory.update_instructions(content, rationale, section)
