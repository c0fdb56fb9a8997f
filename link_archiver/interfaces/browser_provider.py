"""Abstract base class for headless browser session providers.

A session bundles the Playwright driver, the browser (launched locally or
connected remotely) and one configured context.  Both the pipeline (after
the last live-page stage) and finalization release the session, so
``release`` must be safe to call more than once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from playwright.async_api import Browser, BrowserContext, Playwright


@dataclass
class BrowserSession:
    """Handles for one archival run's browser.

    Attributes
    ----------
    playwright:
        The running Playwright driver; stopped exactly once on release.
    browser:
        The local or remote browser.
    context:
        The context every page of this run is opened in.
    stopped:
        Set by the provider once the driver has been stopped.
    """

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    stopped: bool = False

    def is_connected(self) -> bool:
        return self.browser.is_connected()


# Concrete implementations: PlaywrightBrowserProvider
# Located in: link_archiver/providers/browser/
class IBrowserProvider(ABC):
    """Contract for acquiring and releasing browser sessions."""

    @abstractmethod
    async def acquire(self) -> BrowserSession:
        """Start a browser and return a session with a ready context.

        Raises
        ------
        link_archiver.utils.errors.BrowserError
            If the browser cannot be launched or connected to.
        """

    @abstractmethod
    async def release(self, session: BrowserSession) -> None:
        """Close the session's browser if still connected.  Idempotent."""
