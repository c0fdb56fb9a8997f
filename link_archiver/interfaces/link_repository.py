"""Abstract base class for link record persistence.

The orchestrator only needs a narrow read/update contract: read a link by
id (absence means it was deleted by someone else), and write a partial
patch of artifact/status fields.  Tag lookups exist for the auto-tagger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from link_archiver.models.link import Link, LinkPatch


# Concrete implementations: SQLiteLinkRepository
# Located in: link_archiver/providers/storage/
class ILinkRepository(ABC):
    """Contract for reading and patching link records."""

    @abstractmethod
    async def get_link(self, link_id: int) -> Link | None:
        """Return the full link record (owner and tags included), or ``None``.

        ``None`` means the link no longer exists; callers treat that as a
        normal outcome, not an error.
        """

    @abstractmethod
    async def update_link(self, link_id: int, patch: LinkPatch) -> None:
        """Apply *patch* to the link.

        Only fields explicitly set on the patch are written.  Updating a
        link that does not exist is a no-op.

        Raises
        ------
        link_archiver.utils.errors.StorageError
            If the underlying store fails.
        """

    @abstractmethod
    async def list_tag_names(self, owner_id: int) -> list[str]:
        """Return the names of every tag owned by *owner_id*."""

    @abstractmethod
    async def connect_tags(self, link_id: int, owner_id: int, names: list[str]) -> None:
        """Attach tags called *names* to the link, creating missing ones for *owner_id*."""
