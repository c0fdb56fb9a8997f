"""Abstract base class for public web archive submission."""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: WaybackSubmitter
# Located in: link_archiver/providers/wayback/
class IWebArchiveSubmitter(ABC):
    """Contract for asking a public web archive to capture a URL."""

    @abstractmethod
    async def submit(self, url: str) -> str | None:
        """Request a capture of *url*.

        Returns the archived snapshot URL when the archive reports one,
        ``None`` otherwise.  Never raises; callers fire and forget.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this archive."""
