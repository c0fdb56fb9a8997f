"""Archival orchestrator -- archives one link from start to finish.

Flow of :meth:`ArchiveOrchestrator.archive_link`:

    1. ENTRY GUARD   -- preservation disabled or non-http(s) URL: mark every
                        artifact "unavailable", stamp last_preserved, stop.
    2. SESSION       -- acquire a browser session, solve the captcha and
                        inject its cookies, open a page, create folders.
    3. PIPELINE      -- classify the link, optionally submit it to the
                        Wayback Machine, then run the producers for its
                        type.  Raced against the browser timeout.
    4. FINALIZATION  -- always: re-read the record; clean up files if it
                        vanished, otherwise reconcile the title, mark unset
                        artifacts "unavailable" and stamp last_preserved.
                        Release the browser session.

A pipeline error is logged once with the link URL and re-raised after
finalization.  No retries happen here; that is the caller's job.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from playwright.async_api import Page

from link_archiver.config.settings import Settings
from link_archiver.interfaces.browser_provider import BrowserSession, IBrowserProvider
from link_archiver.interfaces.captcha_solver import ICaptchaSolver
from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.interfaces.web_archive import IWebArchiveSubmitter
from link_archiver.models.archive import ArchivalSettings, CaptchaStatus
from link_archiver.models.link import (
    ARTIFACT_FIELDS,
    CAPTCHA_PLACEHOLDER_TITLE,
    UNAVAILABLE,
    Link,
    LinkPatch,
    LinkType,
)
from link_archiver.pipeline.timeout import run_with_timeout
from link_archiver.services.archival_settings import resolve_archival_settings
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
from link_archiver.utils.concurrency import spawn_background
from link_archiver.utils.logging import get_logger
from link_archiver.utils.paths import archive_folder, preview_folder

_HTTP_SCHEMES = ("http://", "https://")

_META_DESCRIPTION_SCRIPT = """() => {
    const description = document.querySelector('meta[name="description"]');
    return description ? description.getAttribute('content') : null;
}"""


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def is_archivable_url(url: str | None) -> bool:
    return bool(url) and url.startswith(_HTTP_SCHEMES)


def reconcile_title(stored_name: str, new_name: str) -> str:
    """Pick the link name to keep after archiving.

    The captured page title only replaces the stored name while the stored
    name is still the captcha interstitial's placeholder.
    """
    if new_name == "" or stored_name == new_name or stored_name != CAPTCHA_PLACEHOLDER_TITLE:
        return stored_name
    return new_name


@dataclass
class Producers:
    """The artifact producers one orchestrator dispatches to."""

    image: ImageArchiver
    pdf: PdfArchiver
    preview: PreviewGenerator
    readability: ReadabilityExtractor
    screenshot_pdf: ScreenshotPdfCapturer
    monolith: MonolithArchiver
    auto_tagger: AutoTagger


@dataclass
class _RunState:
    """Mutable bookkeeping shared by the pipeline and finalization."""

    session: BrowserSession | None = None
    new_name: str = ""


class ArchiveOrchestrator:
    """Archives single links.

    All collaborators are injected; see :func:`link_archiver.main.build_orchestrator`
    for the production wiring.
    """

    def __init__(
        self,
        settings: Settings,
        repository: ILinkRepository,
        file_storage: IFileStorage,
        browser_provider: IBrowserProvider,
        captcha_solver: ICaptchaSolver,
        type_resolver: LinkTypeResolver,
        web_archive: IWebArchiveSubmitter,
        producers: Producers,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._file_storage = file_storage
        self._browser_provider = browser_provider
        self._captcha_solver = captcha_solver
        self._type_resolver = type_resolver
        self._web_archive = web_archive
        self._producers = producers
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def archive_link(self, link: Link) -> None:
        """Archive *link*; re-raises whatever made the pipeline fail.

        Raises
        ------
        link_archiver.utils.errors.ArchiveTimeoutError
            If the pipeline outlived ``BROWSER_TIMEOUT`` minutes.
        link_archiver.utils.errors.LinkArchiverError
            For browser, producer or storage failures.
        """
        if self._settings.disable_preservation or not is_archivable_url(link.url):
            await self._mark_unarchivable(link)
            return

        state = _RunState()
        pipeline_failed = False
        try:
            state.session = await self._browser_provider.acquire()
            await self._apply_captcha_cookies(link, state.session)
            page = await state.session.context.new_page()

            await self._file_storage.create_folder(preview_folder(link.collection_id))
            await self._file_storage.create_folder(archive_folder(link.collection_id))

            archival_settings = resolve_archival_settings(link.tags, link.owner)

            await run_with_timeout(
                lambda cancel_event: self._run_pipeline(link, page, archival_settings, state, cancel_event),
                self._settings.browser_timeout_seconds,
                description="Browser",
            )
        except Exception as exc:
            pipeline_failed = True
            self._logger.error("archive_failed", link_id=link.id, url=link.url, reason=str(exc))
            raise
        finally:
            try:
                await self._finalize(link, state)
            except Exception as exc:
                self._logger.error("finalization_failed", link_id=link.id, url=link.url, error=str(exc))
                if not pipeline_failed:
                    raise
            finally:
                if state.session is not None:
                    await self._browser_provider.release(state.session)

    # ------------------------------------------------------------------
    # Entry guard
    # ------------------------------------------------------------------

    async def _mark_unarchivable(self, link: Link) -> None:
        changes: dict[str, object] = {field_name: UNAVAILABLE for field_name in ARTIFACT_FIELDS}
        changes["last_preserved"] = _now()
        if link.owner.ai_tagging_enabled and not link.ai_tagged and self._settings.has_ai_provider():
            changes["ai_tagged"] = True

        await self._repository.update_link(link.id, LinkPatch(**changes))
        self._logger.info(
            "archive_skipped",
            link_id=link.id,
            url=link.url,
            reason="preservation_disabled" if self._settings.disable_preservation else "unsupported_url",
        )

    # ------------------------------------------------------------------
    # Session setup
    # ------------------------------------------------------------------

    async def _apply_captcha_cookies(self, link: Link, session: BrowserSession) -> None:
        result = await self._captcha_solver.solve(link.url)

        if result.status == CaptchaStatus.ERROR.value:
            self._logger.error("captcha_solve_error", link_id=link.id)
        elif result.status == CaptchaStatus.FAIL.value:
            self._logger.warning("captcha_solve_failed", link_id=link.id)
        elif result.status == CaptchaStatus.SKIP.value:
            self._logger.info("captcha_solve_skipped", link_id=link.id)
        elif result.has_cookies:
            self._logger.info("captcha_solved", link_id=link.id, cookies=len(result.cookies))
            await session.context.add_cookies([cookie.to_playwright() for cookie in result.cookies])

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _run_pipeline(
        self,
        link: Link,
        page: Page,
        archival_settings: ArchivalSettings,
        state: _RunState,
        cancel_event: asyncio.Event,
    ) -> None:
        resolution = await self._type_resolver.resolve(link.id, link.url)

        if archival_settings.archive_as_wayback_machine and link.url:
            spawn_background(self._web_archive.submit(link.url), name=f"wayback-{link.id}")

        if resolution.link_type == LinkType.IMAGE and not link.image:
            await self._producers.image.archive(link, resolution.image_extension)
            return
        if resolution.link_type == LinkType.PDF and not link.pdf:
            await self._producers.pdf.archive(link)
            return
        if not link.url:
            return

        await page.goto(link.url, wait_until="domcontentloaded")
        state.new_name = await page.title()
        meta_description = await page.evaluate(_META_DESCRIPTION_SCRIPT)
        content = await page.content()

        if not link.preview:
            await self._producers.preview.generate(link, page)

        if archival_settings.archive_as_readable and not link.readable:
            await self._producers.readability.extract(content, link)

        if (archival_settings.archive_as_screenshot and not link.image) or (
            archival_settings.archive_as_pdf and not link.pdf
        ):
            await self._producers.screenshot_pdf.capture(link, page, archival_settings)

        # The remaining stages work from the captured HTML only.
        if state.session is not None:
            await self._browser_provider.release(state.session)

        if (
            archival_settings.ai_tag
            and link.owner.ai_tagging_enabled
            and not link.ai_tagged
            and self._settings.has_ai_provider()
        ):
            await self._producers.auto_tagger.auto_tag(link.owner, link.id, meta_description)

        if archival_settings.archive_as_monolith and not link.monolith and link.url:
            try:
                await self._producers.monolith.archive(link, content, cancel_event)
            except Exception as exc:
                self._logger.error("monolith_failed", link_id=link.id, url=link.url, error=str(exc))

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    async def _finalize(self, link: Link, state: _RunState) -> None:
        final = await self._repository.get_link(link.id)

        if final is None:
            self._logger.info("link_vanished", link_id=link.id, collection_id=link.collection_id)
            await self._file_storage.remove_files(link.id, link.collection_id)
            return

        changes: dict[str, object] = {
            field_name: UNAVAILABLE for field_name in ARTIFACT_FIELDS if not getattr(final, field_name)
        }

        name = reconcile_title(final.name, state.new_name)
        if name != final.name:
            changes["name"] = name

        if link.owner.ai_tagging_enabled and not final.ai_tagged:
            changes["ai_tagged"] = True

        changes["last_preserved"] = _now()

        await self._repository.update_link(link.id, LinkPatch(**changes))
        self._logger.info(
            "archive_finalized",
            link_id=link.id,
            unavailable=[key for key, value in changes.items() if value == UNAVAILABLE],
        )
