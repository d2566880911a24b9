from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class AttachmentStore(Protocol):
    """Interface for the store that holds supporting documents.

    Uploads happen outside this service; requests only carry the opaque
    reference the store handed back.
    """

    async def discard(self, ref: str) -> None:
        """Remove a stored attachment. Unknown references are ignored."""
        ...


class InMemoryAttachmentStore:
    """In-memory stub that records discarded references."""

    def __init__(self) -> None:
        self.discarded: list[str] = []

    async def discard(self, ref: str) -> None:
        logger.info("Discarding attachment %s", ref)
        self.discarded.append(ref)


_attachment_store: AttachmentStore = InMemoryAttachmentStore()


def get_attachment_store() -> AttachmentStore:
    """Return the active attachment store."""
    return _attachment_store


def set_attachment_store(store: AttachmentStore) -> None:
    """Override the store (for testing or production wiring)."""
    global _attachment_store
    _attachment_store = store
