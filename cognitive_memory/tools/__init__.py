"""Tool category modules for the cognitive memory server.

- entity_tools: read_entity, write_entity, list_entities
- session_tools: add_note, consolidate
- learning_tools: reflect, update_instructions
"""

from .entity_tools import register_entity_tools
from .learning_tools import register_learning_tools
from .session_tools import register_session_tools

__all__ = [
    "register_entity_tools",
    "register_session_tools",
    "register_learning_tools",
]
