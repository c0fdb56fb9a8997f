"""Archive a single link from the command line.

Usage::

    python -m link_archiver.cli init-db [--db PATH]
    python -m link_archiver.cli archive <link-id> [--db PATH] [--json]

``archive`` loads settings from the environment/.env, runs the archival
orchestrator on one stored link and prints the reconciled record.  Log
lines go to stderr so stdout only carries the record.  Exit code is 0 on
success and 1 when the link is missing or the archival run failed.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from link_archiver.config.settings import Settings
from link_archiver.models.link import ARTIFACT_FIELDS, Link
from link_archiver.providers.storage.sqlite_link_repository import SQLiteLinkRepository
from link_archiver.utils.concurrency import drain_background_tasks
from link_archiver.utils.logging import configure_logging, get_logger


def _format_text_output(link: Link) -> str:
    lines = [
        f"Link {link.id}: {link.name or '(untitled)'}",
        f"  url:            {link.url}",
        f"  type:           {link.type.value}",
    ]
    for field_name in ARTIFACT_FIELDS:
        lines.append(f"  {field_name + ':':<15} {getattr(link, field_name)}")
    lines.append(f"  ai_tagged:      {link.ai_tagged}")
    lines.append(f"  last_preserved: {link.last_preserved.isoformat() if link.last_preserved else None}")
    if link.tags:
        lines.append(f"  tags:           {', '.join(tag.name for tag in link.tags)}")
    return "\n".join(lines)


async def _handle_init_db(args: argparse.Namespace, settings: Settings) -> int:
    repository = SQLiteLinkRepository(args.db or settings.database_path)
    await repository.initialize()
    print(f"Database ready: {args.db or settings.database_path}", file=sys.stderr)
    return 0


async def _handle_archive(args: argparse.Namespace, settings: Settings) -> int:
    # Imported here so `init-db` does not pay for playwright/openai imports.
    from link_archiver.main import build_http_client, build_orchestrator

    logger = get_logger(__name__)
    repository = SQLiteLinkRepository(args.db or settings.database_path)
    await repository.initialize()

    link = await repository.get_link(args.link_id)
    if link is None:
        print(f"Error: link {args.link_id} not found", file=sys.stderr)
        return 1

    exit_code = 0
    async with build_http_client(settings) as client:
        orchestrator = build_orchestrator(settings, repository, http_client=client)
        with structlog.contextvars.bound_contextvars(link_id=link.id):
            try:
                await orchestrator.archive_link(link)
            except Exception as exc:  # noqa: BLE001
                print(f"Error: archiving link {link.id} failed: {exc}", file=sys.stderr)
                exit_code = 1
            finally:
                await drain_background_tasks(timeout=settings.wayback_timeout)

    final = await repository.get_link(link.id)
    if final is None:
        logger.info("link_deleted_during_archive", link_id=link.id)
        return exit_code

    if args.json_output:
        print(final.model_dump_json(indent=2))
    else:
        print(_format_text_output(final))
    return exit_code


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the link archiver CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m link_archiver.cli",
        description="Archive bookmarked links: screenshots, PDFs, readable text and single-file HTML.",
    )
    subparsers = parser.add_subparsers(dest="command", help="link archiver commands")

    # -- init-db --
    init_parser = subparsers.add_parser("init-db", help="Create the link database tables")
    init_parser.add_argument("--db", default=None, help="SQLite database path (default: DATABASE_PATH)")

    # -- archive --
    archive_parser = subparsers.add_parser("archive", help="Archive one stored link")
    archive_parser.add_argument("link_id", type=int, help="Id of the link to archive")
    archive_parser.add_argument("--db", default=None, help="SQLite database path (default: DATABASE_PATH)")
    archive_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the archived record as JSON.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = Settings()
    configure_logging(
        log_level=settings.log_level,
        json_output=(settings.app_env == "production"),
        stream=sys.stderr,
    )

    if args.command == "init-db":
        return asyncio.run(_handle_init_db(args, settings))
    if args.command == "archive":
        return asyncio.run(_handle_archive(args, settings))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
