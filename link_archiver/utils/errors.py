"""Custom exception hierarchy for link_archiver.

All application exceptions inherit from :class:`LinkArchiverError`, which
carries an optional ``provider_name`` so error handlers can identify which
external collaborator (e.g. "playwright", "flaresolverr", "sqlite") caused
the failure.

The hierarchy is organized by the part of the archival run that fails:

    LinkArchiverError  (base -- catch-all for any link_archiver error)
    +-- ConfigurationError   (startup / missing config)
    +-- PipelineError        (orchestration of one archival run)
    |   +-- ArchiveTimeoutError  (the run outlived its time budget)
    +-- BrowserError         (browser launch / remote connection)
    +-- ProducerError        (an artifact producer could not finish)
    +-- StorageError         (link records or archive files)
    +-- LLMError             (AI tagging backend call failure)

Capture backends that merely degrade (captcha solver, header probe, web
archive submission) do not raise; they log and report a status instead.
"""


class LinkArchiverError(Exception):
    """Base exception for all link_archiver errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[playwright] Browser closed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ConfigurationError(LinkArchiverError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Orchestration errors
# ---------------------------------------------------------------------------

class PipelineError(LinkArchiverError):
    """Raised when an archival run fails as a whole."""

    def __init__(
        self,
        message: str = "Archival pipeline failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ArchiveTimeoutError(PipelineError):
    """Raised when the archival pipeline does not finish within its budget.

    The cancellation token has already been set when this is raised, so
    signal-aware producers (monolith) are winding down.
    """

    def __init__(
        self,
        message: str = "Archival pipeline timed out",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External collaborator errors
# ---------------------------------------------------------------------------

class BrowserError(LinkArchiverError):
    """Raised when a browser cannot be launched or connected to."""

    def __init__(
        self,
        message: str = "Browser session could not be established",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProducerError(LinkArchiverError):
    """Raised when an artifact producer (image, PDF, preview, ...) fails."""

    def __init__(
        self,
        message: str = "Artifact producer failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StorageError(LinkArchiverError):
    """Raised when reading/writing link records or archive files fails."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(LinkArchiverError):
    """Raised when an LLM API call fails or returns an unparseable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
