"""Archive file storage."""

from link_archiver.providers.filesystem.local_file_storage import LocalFileStorage

__all__ = ["LocalFileStorage"]
