"""HTTP header probe used to classify a link before archiving it.

Issues a HEAD request (redirects followed).  Servers that refuse HEAD get a
streamed GET whose body is never read.  Any network failure is logged and
reported as ``None`` so that classification falls back to a web page.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx
import structlog

from link_archiver.interfaces.header_probe import IHeaderProbe

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "*/*",
}
_HEAD_REJECTED = {405, 501}


class HttpHeaderProbe(IHeaderProbe):
    """Header probe backed by httpx."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._timeout = timeout
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=_DEFAULT_HEADERS,
            follow_redirects=True,
        )

    async def fetch_headers(self, url: str) -> Mapping[str, str] | None:
        try:
            response = await self._client.head(url, follow_redirects=True, timeout=self._timeout)
            if response.status_code not in _HEAD_REJECTED:
                return response.headers

            async with self._client.stream(
                "GET", url, follow_redirects=True, timeout=self._timeout
            ) as streamed:
                return streamed.headers
        except httpx.HTTPError as exc:
            logger.warning("header_probe_failed", url=url, error=str(exc))
            return None
