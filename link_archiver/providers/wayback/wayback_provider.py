"""Wayback Machine submission provider.

Asks the Internet Archive's "Save Page Now" endpoint to capture a URL.
Submissions are best-effort: the archive is slow and often rate-limits, so
every failure is logged and swallowed and callers never await the result
on the archival pipeline's critical path.
"""

from __future__ import annotations

import httpx
import structlog

from link_archiver.interfaces.web_archive import IWebArchiveSubmitter

logger = structlog.get_logger(logger_name=__name__)

_WAYBACK_SAVE_URL = "https://web.archive.org/save/"
_WAYBACK_HOST = "https://web.archive.org"
_DEFAULT_TIMEOUT = 60.0
_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; link_archiver/0.1)",
}


class WaybackSubmitter(IWebArchiveSubmitter):
    """Submits URLs to web.archive.org/save."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._timeout = timeout
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=_DEFAULT_HEADERS,
        )

    async def submit(self, url: str) -> str | None:
        save_url = f"{_WAYBACK_SAVE_URL}{url}"
        try:
            response = await self._client.get(
                save_url,
                headers=_DEFAULT_HEADERS,
                follow_redirects=True,
                timeout=self._timeout,
            )
        except httpx.TimeoutException:
            logger.warning("wayback_submit_timeout", url=url)
            return None
        except httpx.HTTPError as exc:
            logger.warning("wayback_submit_failed", url=url, error=str(exc))
            return None

        if response.status_code >= 400:
            logger.warning("wayback_submit_rejected", url=url, status=response.status_code)
            return None

        archived = response.headers.get("Content-Location") or str(response.url)
        if archived.startswith("/"):
            archived = f"{_WAYBACK_HOST}{archived}"
        logger.info("wayback_submitted", url=url, archived_url=archived)
        return archived

    def get_provider_name(self) -> str:
        return "wayback"
