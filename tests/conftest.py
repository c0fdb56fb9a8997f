"""Shared pytest fixtures for the link_archiver test suite."""

from __future__ import annotations

import io
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from link_archiver.config.settings import Settings
from link_archiver.interfaces.browser_provider import BrowserSession, IBrowserProvider
from link_archiver.interfaces.captcha_solver import ICaptchaSolver
from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.header_probe import IHeaderProbe
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.interfaces.web_archive import IWebArchiveSubmitter
from link_archiver.models.archive import CaptchaSolveResult, CaptchaStatus
from link_archiver.models.link import AiTaggingMethod, Link, LinkPatch, Tag, User
from link_archiver.pipeline.orchestrator import ArchiveOrchestrator, Producers
from link_archiver.services.link_type_resolver import LinkTypeResolver

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

_ISOLATED_SETTINGS: dict[str, Any] = {
    "disable_preservation": False,
    "browser_timeout": 5,
    "proxy": "",
    "playwright_ws_url": "",
    "playwright_launch_options_executable_path": "",
    "flaresolverr_url": "",
    "ollama_endpoint_url": "",
    "openai_api_key": "",
    "azure_api_key": "",
    "anthropic_api_key": "",
    "openrouter_api_key": "",
}


def make_settings(**overrides: Any) -> Settings:
    """Settings that ignore the developer's .env and credentials."""
    values = {**_ISOLATED_SETTINGS, **overrides}
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


def make_user(**overrides: Any) -> User:
    return User(id=overrides.pop("id", 1), **overrides)


def make_link(**overrides: Any) -> Link:
    defaults: dict[str, Any] = {
        "id": 42,
        "collection_id": 7,
        "owner": make_user(),
        "url": "https://example.com/article",
        "name": "Example",
    }
    defaults.update(overrides)
    return Link(**defaults)


def make_tag(tag_id: int = 1, name: str = "tag", **overrides: Any) -> Tag:
    return Tag(id=tag_id, name=name, **overrides)


def jpeg_bytes(width: int = 1600, height: int = 900) -> bytes:
    """A real JPEG image for Pillow-based code paths."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format="JPEG")
    return buf.getvalue()


def png_bytes(width: int = 64, height: int = 64) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(30, 30, 200)).save(buf, format="PNG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class InMemoryLinkRepository(ILinkRepository):
    """Link store backed by a dict; records every patch it applies."""

    def __init__(self, links: list[Link] | None = None) -> None:
        self.links: dict[int, Link] = {link.id: link for link in links or []}
        self.updates: list[tuple[int, dict[str, Any]]] = []
        self.tag_names: dict[int, list[str]] = {}
        self.connected: list[tuple[int, int, list[str]]] = []

    async def get_link(self, link_id: int) -> Link | None:
        return self.links.get(link_id)

    async def update_link(self, link_id: int, patch: LinkPatch) -> None:
        changes = patch.changes()
        self.updates.append((link_id, changes))
        if link_id in self.links:
            self.links[link_id] = self.links[link_id].model_copy(update=changes)

    async def list_tag_names(self, owner_id: int) -> list[str]:
        return list(self.tag_names.get(owner_id, []))

    async def connect_tags(self, link_id: int, owner_id: int, names: list[str]) -> None:
        self.connected.append((link_id, owner_id, list(names)))

    def delete(self, link_id: int) -> None:
        self.links.pop(link_id, None)

    def fields_updated(self) -> set[str]:
        return {key for _, changes in self.updates for key in changes}


class InMemoryFileStorage(IFileStorage):
    def __init__(self) -> None:
        self.folders: set[str] = set()
        self.files: dict[str, bytes] = {}
        self.removed: list[tuple[int, int]] = []

    async def create_folder(self, path: str) -> None:
        self.folders.add(path)

    async def write_file(self, path: str, data: bytes) -> None:
        self.files[path] = data

    async def remove_files(self, link_id: int, collection_id: int) -> None:
        self.removed.append((link_id, collection_id))


class StaticHeaderProbe(IHeaderProbe):
    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self.headers = headers
        self.calls: list[str] = []

    async def fetch_headers(self, url: str) -> Mapping[str, str] | None:
        self.calls.append(url)
        return self.headers


class StaticCaptchaSolver(ICaptchaSolver):
    def __init__(self, result: CaptchaSolveResult | None = None) -> None:
        self.result = result or CaptchaSolveResult(status=CaptchaStatus.SKIP.value)
        self.calls: list[str] = []

    async def solve(self, url: str, max_timeout: int = 60_000) -> CaptchaSolveResult:
        self.calls.append(url)
        return self.result

    def get_provider_name(self) -> str:
        return "static"


class RecordingWebArchive(IWebArchiveSubmitter):
    def __init__(self) -> None:
        self.submitted: list[str] = []

    async def submit(self, url: str) -> str | None:
        self.submitted.append(url)
        return f"https://web.archive.org/web/2024/{url}"

    def get_provider_name(self) -> str:
        return "recording"


def make_page(
    title: str = "Example Domain",
    content: str = "<html><head><title>Example Domain</title></head><body><p>Hello</p></body></html>",
    description: str | None = "An example page",
) -> MagicMock:
    """A Playwright ``Page`` stand-in."""
    page = MagicMock()
    page.url = "https://example.com/article"
    page.goto = AsyncMock()
    page.title = AsyncMock(return_value=title)
    page.evaluate = AsyncMock(return_value=description)
    page.content = AsyncMock(return_value=content)
    page.screenshot = AsyncMock(return_value=jpeg_bytes(800, 600))
    page.pdf = AsyncMock(return_value=b"%PDF-1.7 fake")
    return page


class FakeBrowserProvider(IBrowserProvider):
    """Hands out one MagicMock-backed session and tracks its lifecycle."""

    def __init__(self, page: MagicMock | None = None) -> None:
        self.page = page or make_page()
        self.acquired = 0
        self.released = 0
        self.connected = False
        self.context = MagicMock()
        self.context.new_page = AsyncMock(return_value=self.page)
        self.context.add_cookies = AsyncMock()

    async def acquire(self) -> BrowserSession:
        self.acquired += 1
        self.connected = True
        browser = MagicMock()
        browser.is_connected = MagicMock(side_effect=lambda: self.connected)
        return BrowserSession(playwright=MagicMock(), browser=browser, context=self.context)

    async def release(self, session: BrowserSession) -> None:
        self.released += 1
        self.connected = False


def make_producers(repository: InMemoryLinkRepository) -> Producers:
    """Producer mocks that write plausible paths through *repository*."""

    async def _image(link: Link, extension: Any) -> None:
        await repository.update_link(
            link.id,
            LinkPatch(
                image=f"archives/{link.collection_id}/{link.id}.{extension.value}",
                preview=f"archives/preview/{link.collection_id}/{link.id}.jpeg",
            ),
        )

    async def _pdf(link: Link) -> None:
        await repository.update_link(link.id, LinkPatch(pdf=f"archives/{link.collection_id}/{link.id}.pdf"))

    async def _preview(link: Link, page: Any) -> None:
        await repository.update_link(
            link.id, LinkPatch(preview=f"archives/preview/{link.collection_id}/{link.id}.jpeg")
        )

    async def _readability(content: str, link: Link) -> None:
        await repository.update_link(
            link.id,
            LinkPatch(
                readable=f"archives/{link.collection_id}/{link.id}_readability.json",
                text_content="Hello",
            ),
        )

    async def _capture(link: Link, page: Any, archival_settings: Any) -> None:
        changes: dict[str, str] = {}
        if archival_settings.archive_as_screenshot and not link.image:
            changes["image"] = f"archives/{link.collection_id}/{link.id}.jpeg"
        if archival_settings.archive_as_pdf and not link.pdf:
            changes["pdf"] = f"archives/{link.collection_id}/{link.id}.pdf"
        await repository.update_link(link.id, LinkPatch(**changes))

    async def _monolith(link: Link, content: str, cancel_event: Any) -> bool:
        await repository.update_link(link.id, LinkPatch(monolith=f"archives/{link.collection_id}/{link.id}.html"))
        return True

    async def _auto_tag(user: User, link_id: int, description: str | None) -> list[str]:
        await repository.update_link(link_id, LinkPatch(ai_tagged=True))
        return ["example"]

    return Producers(
        image=MagicMock(archive=AsyncMock(side_effect=_image)),
        pdf=MagicMock(archive=AsyncMock(side_effect=_pdf)),
        preview=MagicMock(generate=AsyncMock(side_effect=_preview)),
        readability=MagicMock(extract=AsyncMock(side_effect=_readability)),
        screenshot_pdf=MagicMock(capture=AsyncMock(side_effect=_capture)),
        monolith=MagicMock(archive=AsyncMock(side_effect=_monolith)),
        auto_tagger=MagicMock(auto_tag=AsyncMock(side_effect=_auto_tag)),
    )


class OrchestratorHarness:
    """An orchestrator wired to in-memory collaborators, plus handles to them."""

    def __init__(
        self,
        link: Link,
        settings: Settings | None = None,
        headers: Mapping[str, str] | None = None,
        captcha: CaptchaSolveResult | None = None,
        page: MagicMock | None = None,
    ) -> None:
        self.link = link
        self.settings = settings or make_settings()
        self.repository = InMemoryLinkRepository([link])
        self.file_storage = InMemoryFileStorage()
        self.browser = FakeBrowserProvider(page)
        self.captcha = StaticCaptchaSolver(captcha)
        self.header_probe = StaticHeaderProbe(headers if headers is not None else {"content-type": "text/html"})
        self.web_archive = RecordingWebArchive()
        self.producers = make_producers(self.repository)
        self.orchestrator = ArchiveOrchestrator(
            settings=self.settings,
            repository=self.repository,
            file_storage=self.file_storage,
            browser_provider=self.browser,
            captcha_solver=self.captcha,
            type_resolver=LinkTypeResolver(self.header_probe, self.repository),
            web_archive=self.web_archive,
            producers=self.producers,
        )

    @property
    def stored(self) -> Link | None:
        return self.repository.links.get(self.link.id)

    def producer_calls(self) -> int:
        return sum(
            mock.await_count
            for mock in (
                self.producers.image.archive,
                self.producers.pdf.archive,
                self.producers.preview.generate,
                self.producers.readability.extract,
                self.producers.screenshot_pdf.capture,
                self.producers.monolith.archive,
            )
        )


@pytest.fixture
def harness_factory():
    return OrchestratorHarness


@pytest.fixture
def ai_user() -> User:
    return make_user(ai_tagging_method=AiTaggingMethod.GENERATE)


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    root.mkdir()
    return root
