"""Single-file HTML snapshot of a page via the ``monolith`` CLI.

The captured page HTML is piped to ``monolith - -I -b <url> <options>``
which inlines every asset and prints the result on stdout.  The run is
tied to the archival cancellation token: once the token is set, the
process is killed and the snapshot abandoned.

This producer never raises; every failure is logged and reported by
returning ``False``.
"""

from __future__ import annotations

import asyncio
import shlex

import structlog

from link_archiver.interfaces.file_storage import IFileStorage
from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.models.link import Link, LinkPatch
from link_archiver.utils.errors import LinkArchiverError
from link_archiver.utils.paths import archive_path

logger = structlog.get_logger(logger_name=__name__)

_STDERR_PREVIEW_CHARS = 500


def build_monolith_command(
    url: str,
    custom_options: str,
    binary: str = "monolith",
) -> list[str]:
    """Argument vector for a monolith run reading HTML from stdin."""
    return [binary, "-", "-I", "-b", url, *shlex.split(custom_options)]


class MonolithArchiver:
    """Runs monolith and stores its output as ``<id>.html``."""

    def __init__(
        self,
        repository: ILinkRepository,
        file_storage: IFileStorage,
        max_file_size_bytes: int,
        custom_options: str = "-j -F -q",
        max_buffer_bytes: int = 6 * 1024 * 1024,
        binary: str = "monolith",
    ) -> None:
        self._repository = repository
        self._file_storage = file_storage
        self._max_bytes = max_file_size_bytes
        self._custom_options = custom_options
        self._max_buffer = max_buffer_bytes
        self._binary = binary

    async def archive(self, link: Link, content: str, cancel_event: asyncio.Event) -> bool:
        """Snapshot *content*; ``True`` when the ``monolith`` field was written."""
        if not link.url:
            return False
        if cancel_event.is_set():
            logger.warning("monolith_cancelled", link_id=link.id)
            return False

        command = build_monolith_command(link.url, self._custom_options, self._binary)
        try:
            output = await self._run(command, content.encode("utf-8"), cancel_event, link.id)
            if output is None:
                return False
            if len(output) > self._max_bytes:
                logger.warning("monolith_too_large", link_id=link.id, size=len(output), limit=self._max_bytes)
                return False

            target = archive_path(link.collection_id, link.id, "html")
            await self._file_storage.write_file(target, output)
            await self._repository.update_link(link.id, LinkPatch(monolith=target))
        except (OSError, ValueError, LinkArchiverError) as exc:
            logger.error("monolith_failed", link_id=link.id, url=link.url, error=str(exc))
            return False

        logger.info("monolith_archived", link_id=link.id, path=target, size=len(output))
        return True

    async def _run(
        self,
        command: list[str],
        stdin: bytes,
        cancel_event: asyncio.Event,
        link_id: int,
    ) -> bytes | None:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=self._max_buffer,
        )
        communicate = asyncio.ensure_future(process.communicate(stdin))
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({communicate, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()

        if not communicate.done():
            logger.warning("monolith_cancelled", link_id=link_id)
            process.kill()
            await process.wait()
            communicate.cancel()
            return None

        stdout, stderr = communicate.result()
        if process.returncode != 0:
            logger.error(
                "monolith_exit_status",
                link_id=link_id,
                returncode=process.returncode,
                stderr=stderr.decode("utf-8", errors="replace")[-_STDERR_PREVIEW_CHARS:],
            )
            return None
        if not stdout:
            logger.warning("monolith_empty_output", link_id=link_id)
            return None
        return stdout
