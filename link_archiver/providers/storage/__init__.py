"""Link record persistence."""

from link_archiver.providers.storage.sqlite_link_repository import SQLiteLinkRepository

__all__ = ["SQLiteLinkRepository"]
