"""Classify a link as web page, PDF or image from its Content-Type.

The classification is persisted as soon as it is known, independently of
whether the rest of the archival run succeeds.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from link_archiver.interfaces.header_probe import IHeaderProbe
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.archive import LinkTypeResolution
from link_archiver.models.link import ImageExtension, LinkPatch, LinkType

logger = structlog.get_logger(logger_name=__name__)


def classify_content_type(headers: Mapping[str, str] | None) -> LinkTypeResolution:
    """Map response headers to a :class:`LinkTypeResolution`.

    ``application/pdf`` is a PDF, ``image/*`` an image (JPEG kept as
    ``jpeg``, every other subtype stored as ``png``), anything else a page.
    """
    if not headers:
        return LinkTypeResolution()

    content_type = (headers.get("content-type") or "").strip().lower()

    if content_type.startswith("application/pdf"):
        return LinkTypeResolution(link_type=LinkType.PDF)
    if content_type.startswith("image"):
        extension = (
            ImageExtension.JPEG if content_type.startswith("image/jpeg") else ImageExtension.PNG
        )
        return LinkTypeResolution(link_type=LinkType.IMAGE, image_extension=extension)
    return LinkTypeResolution()


class LinkTypeResolver:
    """Probes a link's headers and records its type."""

    def __init__(self, header_probe: IHeaderProbe, repository: ILinkRepository) -> None:
        self._header_probe = header_probe
        self._repository = repository

    async def resolve(self, link_id: int, url: str | None) -> LinkTypeResolution:
        if not url:
            return LinkTypeResolution()

        headers = await self._header_probe.fetch_headers(url)
        resolution = classify_content_type(headers)

        await self._repository.update_link(link_id, LinkPatch(type=resolution.link_type))
        logger.info(
            "link_type_resolved",
            link_id=link_id,
            link_type=resolution.link_type.value,
            image_extension=resolution.image_extension.value,
        )
        return resolution
