"""Abstract base class for lightweight response-header probes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping


# Concrete implementations: HttpHeaderProbe
# Located in: link_archiver/providers/http/
class IHeaderProbe(ABC):
    """Contract for fetching a URL's response headers without its body."""

    @abstractmethod
    async def fetch_headers(self, url: str) -> Mapping[str, str] | None:
        """Return the response headers for *url*, or ``None`` if unavailable.

        Header lookup must be case-insensitive (``httpx.Headers`` is).
        Network failures are logged and reported as ``None``.
        """
