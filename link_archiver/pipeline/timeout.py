"""Deadline for one archival pipeline run.

The pipeline runs as its own task and races a timer task.  Whichever
finishes first decides the outcome:

    pipeline first  -- the timer is cancelled and the pipeline's result
                       (or exception) propagates unchanged
    timer first     -- the cancellation token is set, the pipeline task is
                       abandoned and ArchiveTimeoutError is raised

Abandoning is deliberate: the pipeline is not cancelled.  Only producers
that watch the token (the monolith run) stop early; everything else may
overrun the deadline slightly.  The abandoned task stays referenced until
it ends and whatever it raises is logged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from link_archiver.utils.concurrency import track_background
from link_archiver.utils.errors import ArchiveTimeoutError

logger = structlog.get_logger(logger_name=__name__)

T = TypeVar("T")

PipelineFactory = Callable[[asyncio.Event], Awaitable[T]]


def _format_minutes(timeout_seconds: float) -> str:
    minutes = timeout_seconds / 60
    return f"{minutes:g}"


def timeout_message(timeout_seconds: float, description: str = "Browser") -> str:
    return f"{description} has been open for more than {_format_minutes(timeout_seconds)} minutes."


async def run_with_timeout(
    pipeline_factory: PipelineFactory[T],
    timeout_seconds: float,
    *,
    description: str = "Browser",
) -> T:
    """Run ``pipeline_factory(cancel_event)`` under a *timeout_seconds* deadline.

    Parameters
    ----------
    pipeline_factory:
        Called once with the cancellation token; returns the pipeline
        awaitable.
    timeout_seconds:
        Deadline measured from the moment the pipeline starts.
    description:
        Subject of the timeout message, e.g. ``"Browser"``.

    Raises
    ------
    ArchiveTimeoutError
        If the deadline passes before the pipeline finishes.
    """
    cancel_event = asyncio.Event()
    pipeline = asyncio.ensure_future(pipeline_factory(cancel_event))
    timer = asyncio.ensure_future(asyncio.sleep(timeout_seconds))

    try:
        await asyncio.wait({pipeline, timer}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        cancel_event.set()
        pipeline.cancel()
        raise
    finally:
        timer.cancel()

    if pipeline.done():
        return pipeline.result()

    cancel_event.set()
    track_background(pipeline)
    logger.warning("pipeline_timed_out", timeout_seconds=timeout_seconds)
    raise ArchiveTimeoutError(message=timeout_message(timeout_seconds, description))
