"""Readable-text extraction from captured page HTML.

trafilatura strips navigation, ads and boilerplate.  The JSON document it
produces (text plus title/author/date metadata) is stored as
``<id>_readability.json`` and the plain text is copied onto the link's
``text_content`` so it can be searched and tagged.
"""

from __future__ import annotations

import asyncio
import json

import structlog
import trafilatura

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.link import UNAVAILABLE, Link, LinkPatch
from link_archiver.utils.paths import readability_path

logger = structlog.get_logger(logger_name=__name__)


def extract_readable(content: str, url: str | None = None) -> dict | None:
    """Run trafilatura on *content*; ``None`` when nothing readable is found."""
    document = trafilatura.extract(
        content,
        url=url,
        include_comments=False,
        include_tables=True,
        output_format="json",
        with_metadata=True,
    )
    if not document:
        return None
    try:
        parsed = json.loads(document)
    except json.JSONDecodeError:
        logger.debug("readability_json_invalid", url=url)
        return None
    if not isinstance(parsed, dict) or not parsed.get("text"):
        return None
    return parsed


class ReadabilityExtractor:
    """Writes the readable version of a page and its plain text."""

    def __init__(self, repository: ILinkRepository, file_storage: IFileStorage) -> None:
        self._repository = repository
        self._file_storage = file_storage

    async def extract(self, content: str, link: Link) -> None:
        article = await asyncio.to_thread(extract_readable, content, link.url)
        if article is None:
            logger.warning("trafilatura_extraction_empty", link_id=link.id, url=link.url)
            await self._repository.update_link(link.id, LinkPatch(readable=UNAVAILABLE))
            return

        target = readability_path(link.collection_id, link.id)
        await self._file_storage.write_file(
            target,
            json.dumps(article, ensure_ascii=False).encode("utf-8"),
        )
        await self._repository.update_link(
            link.id,
            LinkPatch(readable=target, text_content=article["text"]),
        )
        logger.info("readability_extracted", link_id=link.id, text_length=len(article["text"]))
