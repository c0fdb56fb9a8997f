"""Generate the preview thumbnail of a web page.

The page's ``og:image`` is preferred; when it is missing or cannot be
fetched, a viewport screenshot of the live page is used instead.
"""

from __future__ import annotations

from urllib.parse import urljoin

import httpx
import structlog
from playwright.async_api import Page

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.link import Link, LinkPatch
from link_archiver.services.preservation.media import (
    DEFAULT_DOWNLOAD_HEADERS,
    download_with_limit,
    make_preview_jpeg,
)
from link_archiver.utils.errors import ProducerError
from link_archiver.utils.paths import preview_path

logger = structlog.get_logger(logger_name=__name__)

_OG_IMAGE_SCRIPT = """() => {
    const meta = document.querySelector('meta[property="og:image"], meta[name="og:image"]');
    return meta ? meta.getAttribute('content') : null;
}"""

# Preview sources are small; anything bigger is not worth a thumbnail.
_MAX_OG_IMAGE_BYTES = 10 * 1024 * 1024


class PreviewGenerator:
    """Builds ``archives/preview/<collection>/<id>.jpeg`` from a live page."""

    def __init__(
        self,
        repository: ILinkRepository,
        file_storage: IFileStorage,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._repository = repository
        self._file_storage = file_storage
        self._client = http_client or httpx.AsyncClient(headers=DEFAULT_DOWNLOAD_HEADERS)

    async def generate(self, link: Link, page: Page) -> None:
        thumbnail: bytes | None = None
        og_image = await self._fetch_og_image(link, page)
        if og_image is not None:
            try:
                thumbnail = await make_preview_jpeg(og_image)
            except ProducerError as exc:
                logger.debug("og_image_undecodable", link_id=link.id, error=str(exc))

        if thumbnail is None:
            screenshot = await page.screenshot(type="jpeg", quality=80)
            thumbnail = await make_preview_jpeg(screenshot)

        target = preview_path(link.collection_id, link.id)
        await self._file_storage.write_file(target, thumbnail)
        await self._repository.update_link(link.id, LinkPatch(preview=target))
        logger.info("preview_generated", link_id=link.id, path=target)

    async def _fetch_og_image(self, link: Link, page: Page) -> bytes | None:
        og_image = await page.evaluate(_OG_IMAGE_SCRIPT)
        if not og_image or not isinstance(og_image, str):
            return None

        image_url = urljoin(link.url or page.url, og_image.strip())
        try:
            data = await download_with_limit(self._client, image_url, _MAX_OG_IMAGE_BYTES)
        except ProducerError as exc:
            logger.debug("og_image_unavailable", link_id=link.id, url=image_url, error=str(exc))
            return None
        return data or None
