"""Local-disk archive storage.

Stores artifacts under a root directory (``STORAGE_FOLDER``).  Blocking
filesystem calls run in a worker thread so the event loop stays free while
large screenshots and PDFs are written.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.utils.errors import StorageError
from link_archiver.utils.paths import archive_folder, preview_folder

logger = structlog.get_logger(logger_name=__name__)


class LocalFileStorage(IFileStorage):
    """File storage rooted at a local directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Absolute location of a storage-relative *path*.

        Raises
        ------
        StorageError
            If *path* would escape the storage root.
        """
        root = self._root.resolve()
        target = (root / path).resolve()
        if target != root and root not in target.parents:
            raise StorageError(message=f"Path escapes storage root: {path}", provider_name="filesystem")
        return target

    async def create_folder(self, path: str) -> None:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                message=f"Could not create folder {path}: {exc}",
                provider_name="filesystem",
            ) from exc

    async def write_file(self, path: str, data: bytes) -> None:
        target = self.resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageError(
                message=f"Could not write {path}: {exc}",
                provider_name="filesystem",
            ) from exc
        logger.debug("file_written", path=path, size=len(data))

    async def remove_files(self, link_id: int, collection_id: int) -> None:
        archive_dir = self.resolve(archive_folder(collection_id))
        preview_dir = self.resolve(preview_folder(collection_id))

        def _remove() -> int:
            candidates = [
                *archive_dir.glob(f"{link_id}.*"),
                *archive_dir.glob(f"{link_id}_*"),
                *preview_dir.glob(f"{link_id}.*"),
            ]
            removed = 0
            for candidate in candidates:
                if candidate.is_file():
                    candidate.unlink(missing_ok=True)
                    removed += 1
            return removed

        try:
            removed = await asyncio.to_thread(_remove)
        except OSError as exc:
            raise StorageError(
                message=f"Could not remove files for link {link_id}: {exc}",
                provider_name="filesystem",
            ) from exc
        logger.info("link_files_removed", link_id=link_id, collection_id=collection_id, count=removed)
