"""Headless browser providers.

PlaywrightBrowserProvider launches a local Chromium or connects to a
remote one over CDP (PLAYWRIGHT_WS_URL).
"""

from link_archiver.providers.browser.playwright_provider import PlaywrightBrowserProvider

__all__ = ["PlaywrightBrowserProvider"]
