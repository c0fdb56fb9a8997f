"""Pipeline orchestration components for link archival."""

from link_archiver.pipeline.orchestrator import ArchiveOrchestrator, Producers
from link_archiver.pipeline.timeout import run_with_timeout

__all__ = [
    "ArchiveOrchestrator",
    "Producers",
    "run_with_timeout",
]
