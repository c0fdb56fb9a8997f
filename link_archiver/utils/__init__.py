"""Utility modules for link_archiver.

- **errors** -- Domain exception hierarchy rooted at LinkArchiverError.
- **logging** -- structlog setup with console output in development and
  structured JSON in production.
- **concurrency** -- Detached fire-and-forget tasks with strong references
  and failure logging.
- **paths** (not re-exported here) -- Relative archive paths for a link's
  artifacts.
"""

from link_archiver.utils.concurrency import drain_background_tasks, spawn_background
from link_archiver.utils.errors import (
    ArchiveTimeoutError,
    BrowserError,
    ConfigurationError,
    LinkArchiverError,
    LLMError,
    PipelineError,
    ProducerError,
    StorageError,
)
from link_archiver.utils.logging import configure_logging, get_logger

__all__ = [
    "ArchiveTimeoutError",
    "BrowserError",
    "ConfigurationError",
    "LLMError",
    "LinkArchiverError",
    "PipelineError",
    "ProducerError",
    "StorageError",
    "configure_logging",
    "drain_background_tasks",
    "get_logger",
    "spawn_background",
]
