"""Pydantic models for the cognitive memory server.

Request and response shapes for every MCP tool.
"""

from typing import Literal

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import Field

NoteType = Literal["context", "insight", "decision"]
Importance = Literal["low", "medium", "high"]
ReflectionType = Literal["daily", "session", "project"]
InstructionAction = Literal["created", "replaced", "appended"]


# === Core Operation Models ===


class OperationStatus(BaseModel):
    """Generic status for operations."""

    success: bool
    message: str


class WriteResult(BaseModel):
    """Outcome of a wholesale entity write."""

    success: bool
    path: str


# === Content Models ===


class EntityContent(BaseModel):
    """Full or paginated content of an entity."""

    path: str
    content: str
    total_lines: int  # lines in the whole document
    returned_lines: int  # lines in ``content``
    offset: int | None = None  # only set for offset/limit reads


class EntitySpec(BaseModel):
    """One entity in a consolidation batch."""

    path: str = Field(description='Entity path (e.g., "concepts/new-pattern", "projects/project-name")')
    content: str = Field(description="Full markdown content for the entity")
    summary: str = Field(
        validation_alias=AliasChoices("summary", "anchor_summary"),
        description="Brief summary for the context anchors ledger",
    )


# === Workflow Result Models ===


class ReflectionResult(BaseModel):
    """Outcome of appending a reflection to the dream journal."""

    success: bool
    message: str
    rotated: bool | None = None
    archived_to: str | None = None


class ConsolidationResult(BaseModel):
    """Outcome of a consolidation run."""

    success: bool
    message: str
    entities_created: list[str]
    session_reset: bool
    session_archived: bool
    archive_path: str | None = None
    context_anchors_updated: bool


class InstructionUpdateResult(BaseModel):
    """Outcome of a base instructions update."""

    success: bool
    message: str
    section_updated: str
    action: InstructionAction
