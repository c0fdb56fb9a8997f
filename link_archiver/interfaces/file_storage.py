"""Abstract base class for archive file storage.

Paths passed to these methods are relative to the storage root (see
:mod:`link_archiver.utils.paths`).  Implementations may target a local
directory or an object store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: LocalFileStorage
# Located in: link_archiver/providers/filesystem/
class IFileStorage(ABC):
    """Contract for the folder/file lifecycle of archived artifacts."""

    @abstractmethod
    async def create_folder(self, path: str) -> None:
        """Ensure *path* exists, creating parents.  Idempotent."""

    @abstractmethod
    async def write_file(self, path: str, data: bytes) -> None:
        """Write *data* to *path*, replacing any existing file."""

    @abstractmethod
    async def remove_files(self, link_id: int, collection_id: int) -> None:
        """Delete every artifact stored for the link.  Idempotent.

        Used when a link disappeared while it was being archived.
        """
