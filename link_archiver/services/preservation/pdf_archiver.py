"""Archive a link that points directly at a PDF document."""

from __future__ import annotations

import httpx
import structlog

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.link import UNAVAILABLE, Link, LinkPatch
from link_archiver.services.preservation.media import (
    DEFAULT_DOWNLOAD_HEADERS,
    FileTooLargeError,
    download_with_limit,
)
from link_archiver.utils.paths import archive_path

logger = structlog.get_logger(logger_name=__name__)

_PDF_MAGIC = b"%PDF"


class PdfArchiver:
    """Downloads PDF documents into the collection's archive folder."""

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

    async def archive(self, link: Link) -> None:
        if not link.url:
            return

        try:
            data = await download_with_limit(self._client, link.url, self._max_bytes)
        except FileTooLargeError as exc:
            logger.warning("pdf_too_large", link_id=link.id, error=str(exc))
            await self._repository.update_link(link.id, LinkPatch(pdf=UNAVAILABLE))
            return

        if not data.lstrip().startswith(_PDF_MAGIC):
            # Content-Type said PDF; keep the bytes anyway but flag it.
            logger.warning("pdf_signature_missing", link_id=link.id)

        pdf_file = archive_path(link.collection_id, link.id, "pdf")
        await self._file_storage.write_file(pdf_file, data)
        await self._repository.update_link(link.id, LinkPatch(pdf=pdf_file))
        logger.info("pdf_archived", link_id=link.id, path=pdf_file, size=len(data))
