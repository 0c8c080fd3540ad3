"""Cognitive memory MCP server: a file-backed memory for AI assistants."""

from .exceptions import CognitiveMemoryError
from .exceptions import EntityNotFoundError
from .exceptions import PathEscapeError
from .memory import CognitiveMemory
from .store import DocumentStore

__version__ = "0.1.0"

__all__ = [
    "CognitiveMemory",
    "DocumentStore",
    "CognitiveMemoryError",
    "EntityNotFoundError",
    "PathEscapeError",
]
