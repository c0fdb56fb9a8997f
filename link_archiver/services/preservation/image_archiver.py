"""Archive a link that points directly at an image.

The original bytes are stored as the link's ``image`` artifact and a
downscaled JPEG of the same image becomes its preview.
"""

from __future__ import annotations

import httpx
import structlog

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.link import UNAVAILABLE, ImageExtension, Link, LinkPatch
from link_archiver.services.preservation.media import (
    DEFAULT_DOWNLOAD_HEADERS,
    FileTooLargeError,
    download_with_limit,
    make_preview_jpeg,
)
from link_archiver.utils.errors import ProducerError
from link_archiver.utils.paths import archive_path, preview_path

logger = structlog.get_logger(logger_name=__name__)


class ImageArchiver:
    """Downloads raw images and stores them with a preview thumbnail."""

    def __init__(
        self,
        repository: ILinkRepository,
        file_storage: IFileStorage,
        max_file_size_bytes: int,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._repository = repository
        self._file_storage = file_storage
        self._max_bytes = max_file_size_bytes
        self._client = http_client or httpx.AsyncClient(headers=DEFAULT_DOWNLOAD_HEADERS)

    async def archive(self, link: Link, extension: ImageExtension) -> None:
        """Store the image behind ``link.url`` as ``<id>.<extension>``.

        Raises
        ------
        ProducerError
            If the download fails.
        """
        if not link.url:
            return

        try:
            data = await download_with_limit(self._client, link.url, self._max_bytes)
        except FileTooLargeError as exc:
            logger.warning("image_too_large", link_id=link.id, error=str(exc))
            await self._repository.update_link(link.id, LinkPatch(image=UNAVAILABLE))
            return

        image_file = archive_path(link.collection_id, link.id, extension.value)
        await self._file_storage.write_file(image_file, data)
        patch: dict[str, str] = {"image": image_file}

        if not link.preview:
            try:
                thumbnail = await make_preview_jpeg(data)
            except ProducerError as exc:
                logger.warning("image_preview_failed", link_id=link.id, error=str(exc))
            else:
                preview_file = preview_path(link.collection_id, link.id)
                await self._file_storage.write_file(preview_file, thumbnail)
                patch["preview"] = preview_file

        await self._repository.update_link(link.id, LinkPatch(**patch))
        logger.info("image_archived", link_id=link.id, path=image_file, size=len(data))
