"""Input pre-checks for MCP tool arguments.

Each validator returns ``(is_valid, error_message)``; ``require`` turns a
failed check into a ``ValidationError`` for the tool layer. Confinement is
not checked here: that is the path sandbox's job and happens after resolution.
"""

from collections.abc import Sequence
from typing import Any

from .exceptions import ValidationError

MAX_ENTITY_PATH_LENGTH = 512


def validate_entity_path(entity_path: Any) -> tuple[bool, str | None]:
    if not isinstance(entity_path, str) or not entity_path.strip():
        return False, "Entity path cannot be empty"
    if len(entity_path) > MAX_ENTITY_PATH_LENGTH:
        return False, f"Entity path too long (max {MAX_ENTITY_PATH_LENGTH} characters)"
    if "\x00" in entity_path:
        return False, "Entity path cannot contain NUL characters"
    return True, None


def validate_line_count(value: int | None, name: str) -> tuple[bool, str | None]:
    if value is None:
        return True, None
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be an integer"
    if value < 0:
        return False, f"{name} cannot be negative"
    return True, None


def validate_key_insights(key_insights: Sequence[str]) -> tuple[bool, str | None]:
    if not key_insights:
        return False, "At least one key insight is required"
    return True, None


def validate_entity_batch(entities: Sequence[Any]) -> tuple[bool, str | None]:
    if not entities:
        return False, "At least one entity is required"
    for index, entity in enumerate(entities):
        is_valid, error = validate_entity_path(getattr(entity, "path", None))
        if not is_valid:
            return False, f"entities[{index}]: {error}"
    return True, None


def validate_non_empty(value: Any, name: str) -> tuple[bool, str | None]:
    if not isinstance(value, str) or not value.strip():
        return False, f"{name} cannot be empty"
    return True, None


def require(check: tuple[bool, str | None], field: str, value: Any = None) -> None:
    """Raise ``ValidationError`` when a validator reported a failure."""
    is_valid, error = check
    if not is_valid:
        raise ValidationError(error or "invalid value", field=field, value=value)
