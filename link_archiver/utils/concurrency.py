"""Detached background tasks for fire-and-forget side work.

The event loop only keeps weak references to tasks, so a task created with
``asyncio.create_task`` and then dropped can be garbage-collected before it
finishes.  :func:`spawn_background` keeps a strong reference in a
module-level set until the task completes and logs whatever the task
raised, so nobody ever has to await it.

Used for the Wayback Machine submission, which must neither block nor fail
the archival pipeline.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

import structlog

from link_archiver.utils.logging import get_logger

_BACKGROUND_TASKS: set[asyncio.Task[Any]] = set()

_logger: structlog.BoundLogger = get_logger(__name__)


def _on_background_done(task: asyncio.Task[Any]) -> None:
    _BACKGROUND_TASKS.discard(task)
    if task.cancelled():
        _logger.debug("background_task_cancelled", task=task.get_name())
        return
    exc = task.exception()
    if exc is not None:
        _logger.warning("background_task_failed", task=task.get_name(), error=str(exc))


def spawn_background(coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
    """Schedule *coro* as a detached task and return it.

    The caller may ignore the returned task.  Exceptions are logged at
    WARNING level and never propagate.
    """
    return track_background(asyncio.create_task(coro, name=name))


def track_background(task: asyncio.Task[Any]) -> asyncio.Task[Any]:
    """Keep a strong reference to an already running *task* until it ends.

    Its outcome is logged the same way as for :func:`spawn_background`.
    """
    _BACKGROUND_TASKS.add(task)
    task.add_done_callback(_on_background_done)
    return task


def pending_background_tasks() -> set[asyncio.Task[Any]]:
    """Return a snapshot of the background tasks that have not finished yet."""
    return set(_BACKGROUND_TASKS)


async def drain_background_tasks(timeout: float | None = None) -> None:
    """Wait (up to *timeout* seconds) for outstanding background tasks.

    Short-lived processes such as the CLI call this before the event loop
    shuts down so that fire-and-forget submissions get a chance to finish.
    """
    pending = pending_background_tasks()
    if not pending:
        return
    _done, still_pending = await asyncio.wait(pending, timeout=timeout)
    if still_pending:
        _logger.info("background_tasks_abandoned", count=len(still_pending))
