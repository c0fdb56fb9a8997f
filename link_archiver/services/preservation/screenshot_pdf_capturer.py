"""Full-page screenshot and PDF export of a live page."""

from __future__ import annotations

import structlog
from playwright.async_api import Page

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.archive import ArchivalSettings
from link_archiver.models.link import UNAVAILABLE, Link, LinkPatch
from link_archiver.utils.paths import archive_path

logger = structlog.get_logger(logger_name=__name__)

_PAGE_WIDTH = "1366px"
_PDF_MARGIN = {"top": "15px", "bottom": "15px", "left": "0px", "right": "0px"}


class ScreenshotPdfCapturer:
    """Captures ``<id>.jpeg`` and/or ``<id>.pdf`` for enabled, unset artifacts."""

    def __init__(
        self,
        repository: ILinkRepository,
        file_storage: IFileStorage,
        max_file_size_bytes: int,
    ) -> None:
        self._repository = repository
        self._file_storage = file_storage
        self._max_bytes = max_file_size_bytes

    async def capture(self, link: Link, page: Page, archival_settings: ArchivalSettings) -> None:
        changes: dict[str, str] = {}

        if archival_settings.archive_as_screenshot and not link.image:
            screenshot = await page.screenshot(full_page=True, type="jpeg", quality=80)
            changes["image"] = await self._store(link, "jpeg", screenshot)

        if archival_settings.archive_as_pdf and not link.pdf:
            pdf = await page.pdf(width=_PAGE_WIDTH, print_background=True, margin=_PDF_MARGIN)
            changes["pdf"] = await self._store(link, "pdf", pdf)

        if changes:
            await self._repository.update_link(link.id, LinkPatch(**changes))

    async def _store(self, link: Link, extension: str, data: bytes) -> str:
        if len(data) > self._max_bytes:
            logger.warning(
                "capture_too_large",
                link_id=link.id,
                extension=extension,
                size=len(data),
                limit=self._max_bytes,
            )
            return UNAVAILABLE

        target = archive_path(link.collection_id, link.id, extension)
        await self._file_storage.write_file(target, data)
        logger.info("page_captured", link_id=link.id, path=target, size=len(data))
        return target
