"""link_archiver composition root.

Wires every provider and service into an :class:`ArchiveOrchestrator` via
dependency injection.  This is the only module that picks concrete
implementations; everything else depends on the interfaces.
"""

from __future__ import annotations

import httpx

from link_archiver.config.settings import Settings
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.pipeline.orchestrator import ArchiveOrchestrator, Producers
from link_archiver.providers.browser.playwright_provider import PlaywrightBrowserProvider
from link_archiver.providers.captcha.flaresolverr_provider import FlareSolverrProvider
from link_archiver.providers.filesystem.local_file_storage import LocalFileStorage
from link_archiver.providers.http.header_probe import HttpHeaderProbe
from link_archiver.providers.llm import build_llm_provider
from link_archiver.providers.wayback.wayback_provider import WaybackSubmitter
from link_archiver.services.auto_tagger import AutoTagger
from link_archiver.services.link_type_resolver import LinkTypeResolver
from link_archiver.services.preservation import (
    ImageArchiver,
    MonolithArchiver,
    PdfArchiver,
    PreviewGenerator,
    ReadabilityExtractor,
    ScreenshotPdfCapturer,
)
from link_archiver.services.preservation.media import DEFAULT_DOWNLOAD_HEADERS
from link_archiver.utils.logging import get_logger

logger = get_logger(__name__)

_MEGABYTE = 1024 * 1024


def build_proxy(settings: Settings) -> httpx.Proxy | None:
    """HTTP proxy for outgoing non-browser requests, from the PROXY settings."""
    if not settings.proxy:
        return None
    if settings.proxy_username:
        return httpx.Proxy(settings.proxy, auth=(settings.proxy_username, settings.proxy_password))
    return httpx.Proxy(settings.proxy)


def build_proxy_mounts(settings: Settings) -> dict[str, None]:
    """httpx mounts that send PROXY_BYPASS hosts around the proxy.

    PROXY_BYPASS uses the browser's comma-separated syntax:
    ``example.com``, ``.example.com`` (domain and subdomains) or
    ``*.example.com`` (subdomains only).  Mounting a pattern to ``None``
    routes it through the client's direct transport.
    """
    if not settings.proxy or not settings.proxy_bypass:
        return {}

    mounts: dict[str, None] = {}
    for entry in settings.proxy_bypass.split(","):
        host = entry.strip()
        if not host or host.startswith("<"):
            continue
        if host.startswith("."):
            host = f"*{host[1:]}"
        mounts[f"all://{host}"] = None
    return mounts


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for header probes, downloads and the captcha backend."""
    return httpx.AsyncClient(
        headers=DEFAULT_DOWNLOAD_HEADERS,
        timeout=httpx.Timeout(settings.header_probe_timeout),
        follow_redirects=True,
        proxy=build_proxy(settings),
        mounts=build_proxy_mounts(settings),
        verify=not settings.ignore_https_errors,
    )


def build_orchestrator(
    settings: Settings,
    repository: ILinkRepository,
    http_client: httpx.AsyncClient | None = None,
) -> ArchiveOrchestrator:
    """Instantiate all providers and services and return the orchestrator."""
    client = http_client or build_http_client(settings)
    file_storage = LocalFileStorage(settings.storage_folder)
    max_bytes = settings.max_file_size_bytes

    llm_provider = build_llm_provider(settings)
    logger.info(
        "orchestrator_built",
        storage_folder=settings.storage_folder,
        remote_browser=bool(settings.playwright_ws_url),
        captcha_backend=bool(settings.flaresolverr_url),
        llm_provider=llm_provider.get_provider_name() if llm_provider else None,
    )

    producers = Producers(
        image=ImageArchiver(repository, file_storage, max_bytes, http_client=client),
        pdf=PdfArchiver(repository, file_storage, max_bytes, http_client=client),
        preview=PreviewGenerator(repository, file_storage, http_client=client),
        readability=ReadabilityExtractor(repository, file_storage),
        screenshot_pdf=ScreenshotPdfCapturer(repository, file_storage, max_bytes),
        monolith=MonolithArchiver(
            repository,
            file_storage,
            max_bytes,
            custom_options=settings.monolith_custom_options,
            max_buffer_bytes=settings.monolith_max_buffer * _MEGABYTE,
        ),
        auto_tagger=AutoTagger(repository, llm_provider),
    )

    return ArchiveOrchestrator(
        settings=settings,
        repository=repository,
        file_storage=file_storage,
        browser_provider=PlaywrightBrowserProvider(settings),
        captcha_solver=FlareSolverrProvider(settings, http_client=client),
        type_resolver=LinkTypeResolver(
            HttpHeaderProbe(http_client=client, timeout=settings.header_probe_timeout),
            repository,
        ),
        web_archive=WaybackSubmitter(http_client=client, timeout=settings.wayback_timeout),
        producers=producers,
    )
