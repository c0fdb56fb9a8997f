"""Public interface definitions for every external collaborator.

The orchestrator and the preservation services reach storage, the
browser, the captcha backend, the header probe, the web archive and LLMs
only through the abstract base classes defined in this package.  Concrete
adapters live in ``link_archiver/providers/`` and are wired together in
``link_archiver/main.py``.

CONCRETE PROVIDER MAP:
    Interface               →  Concrete implementations
    ─────────────────────────────────────────────────────────────────────
    ILinkRepository         →  SQLiteLinkRepository
    IFileStorage            →  LocalFileStorage
    IBrowserProvider        →  PlaywrightBrowserProvider
    ICaptchaSolver          →  FlareSolverrProvider
    IHeaderProbe            →  HttpHeaderProbe
    IWebArchiveSubmitter    →  WaybackSubmitter
    ILLMProvider            →  OpenAILLMProvider, AzureOpenAILLMProvider,
                               OpenRouterLLMProvider, OllamaLLMProvider,
                               AnthropicLLMProvider
"""

from link_archiver.interfaces.browser_provider import BrowserSession, IBrowserProvider
from link_archiver.interfaces.captcha_solver import ICaptchaSolver
from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.header_probe import IHeaderProbe
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.interfaces.llm_provider import ILLMProvider
from link_archiver.interfaces.web_archive import IWebArchiveSubmitter

__all__ = [
    "BrowserSession",
    "IBrowserProvider",
    "ICaptchaSolver",
    "IFileStorage",
    "IHeaderProbe",
    "ILLMProvider",
    "ILinkRepository",
    "IWebArchiveSubmitter",
]
