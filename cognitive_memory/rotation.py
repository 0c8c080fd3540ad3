"""Size-triggered rotation for append-only documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_ROTATION_THRESHOLD = 1024 * 1024


@dataclass(frozen=True)
class RotationOutcome:
    rotated: bool
    archived_to: str | None = None
    previous_size: int = 0


async def next_free_path(store: DocumentStore, base: str) -> str:
    """``base`` if unused, otherwise the first free ``base_2``, ``base_3``, ..."""
    candidate = base
    suffix = 2
    while await store.exists(candidate):
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate


class RotationManager:
    """Appends to a growing document, archiving it once it reaches a size threshold.

    The archive is the current document renamed to ``<path>_<date>``; the
    fresh document starts with a header and a pointer line naming the archive.
    A second rotation on the same day gets a numbered archive name rather than
    overwriting the first.
    """

    def __init__(
        self,
        store: DocumentStore,
        entity_path: str,
        title: str,
        threshold_bytes: int = DEFAULT_ROTATION_THRESHOLD,
    ):
        self.store = store
        self.entity_path = entity_path
        self.title = title
        self.threshold_bytes = threshold_bytes

    @property
    def preamble(self) -> str:
        return f"# {self.title}\n"

    def rotated_header(self, archive_path: str) -> str:
        return f"# {self.title}\n\n*Previous journal archived to: {archive_path}*\n\n"

    async def needs_rotation(self) -> tuple[bool, int]:
        size = await self.store.size(self.entity_path)
        return size > 0 and size >= self.threshold_bytes, size

    async def append(self, content: str, date: str) -> RotationOutcome:
        """Append ``content``, rotating first when the document is over the threshold."""
        rotate, size = await self.needs_rotation()

        if rotate:
            archive_path = await next_free_path(self.store, f"{self.entity_path}_{date}")
            await self.store.rename(self.entity_path, archive_path)
            await self.store.write(self.entity_path, self.rotated_header(archive_path) + content)
            logger.info(
                "Rotated %s (%d bytes) to %s", self.entity_path, size, archive_path
            )
            return RotationOutcome(rotated=True, archived_to=archive_path, previous_size=size)

        existing = await self.store.try_read(self.entity_path)
        if existing is None:
            existing = self.preamble
        await self.store.write(self.entity_path, existing + content)
        return RotationOutcome(rotated=False, previous_size=size)
