"""Playwright-backed browser session provider.

Launches a local Chromium or connects to a remote one over CDP, then
creates a context using the "Desktop Chrome" device profile.

Launch-level options (proxy, executable path) cannot be applied to a
browser that is already running, so with a remote endpoint the proxy is
moved onto the context instead and the executable path is ignored.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from link_archiver.config.settings import Settings
from link_archiver.interfaces.browser_provider import BrowserSession, IBrowserProvider
from link_archiver.utils.errors import BrowserError

logger = structlog.get_logger(logger_name=__name__)

_DEVICE_PROFILE = "Desktop Chrome"

# Device descriptors carry the browser they were recorded with; new_context
# does not take it.
_NON_CONTEXT_DEVICE_KEYS = {"default_browser_type"}


class PlaywrightBrowserProvider(IBrowserProvider):
    """Browser sessions driven by Playwright's async API.

    Parameters
    ----------
    settings:
        Proxy, remote endpoint, executable path and TLS options.
    playwright_factory:
        Callable returning a Playwright context manager; tests inject a fake.
    """

    def __init__(
        self,
        settings: Settings,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self._settings = settings
        self._playwright_factory = playwright_factory

    # ------------------------------------------------------------------
    # Option building
    # ------------------------------------------------------------------

    def build_launch_options(self) -> dict[str, Any]:
        """Return proxy/executable options derived from settings."""
        options: dict[str, Any] = {}

        if self._settings.proxy:
            proxy: dict[str, str] = {"server": self._settings.proxy}
            if self._settings.proxy_bypass:
                proxy["bypass"] = self._settings.proxy_bypass
            if self._settings.proxy_username:
                proxy["username"] = self._settings.proxy_username
            if self._settings.proxy_password:
                proxy["password"] = self._settings.proxy_password
            options["proxy"] = proxy

        if (
            self._settings.playwright_launch_options_executable_path
            and not self._settings.playwright_ws_url
        ):
            options["executable_path"] = self._settings.playwright_launch_options_executable_path

        return options

    def build_context_options(self, playwright: Playwright) -> dict[str, Any]:
        """Return new_context kwargs: device profile, TLS flag, remote-only launch options."""
        device = {
            key: value
            for key, value in playwright.devices[_DEVICE_PROFILE].items()
            if key not in _NON_CONTEXT_DEVICE_KEYS
        }
        options: dict[str, Any] = {
            **device,
            "ignore_https_errors": self._settings.ignore_https_errors,
        }
        if self._settings.playwright_ws_url:
            options.update(self.build_launch_options())
        return options

    # ------------------------------------------------------------------
    # IBrowserProvider implementation
    # ------------------------------------------------------------------

    async def acquire(self) -> BrowserSession:
        """Start Playwright, obtain a browser and open a context."""
        playwright = await self._playwright_factory().start()
        browser: Browser | None = None
        remote = bool(self._settings.playwright_ws_url)

        try:
            if remote:
                browser = await playwright.chromium.connect_over_cdp(self._settings.playwright_ws_url)
            else:
                browser = await playwright.chromium.launch(**self.build_launch_options())
            context = await browser.new_context(**self.build_context_options(playwright))
        except PlaywrightError as exc:
            logger.error("browser_acquire_failed", remote=remote, error=str(exc))
            if browser is not None and browser.is_connected():
                await browser.close()
            await playwright.stop()
            raise BrowserError(
                message=f"Could not start browser: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("browser_acquired", remote=remote)
        return BrowserSession(playwright=playwright, browser=browser, context=context)

    async def release(self, session: BrowserSession) -> None:
        """Close the browser while connected and stop the driver once."""
        if session.is_connected():
            try:
                await session.browser.close()
            except PlaywrightError as exc:
                logger.warning("browser_close_failed", error=str(exc))

        if not session.stopped:
            session.stopped = True
            try:
                await session.playwright.stop()
            except PlaywrightError as exc:
                logger.warning("playwright_stop_failed", error=str(exc))

    def get_provider_name(self) -> str:
        return "playwright"
