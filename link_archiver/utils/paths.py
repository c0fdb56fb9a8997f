"""Relative archive paths for a link's artifacts.

All paths are relative to the storage root and use forward slashes; they
are what gets written into a link's artifact fields.  Layout::

    archives/<collection_id>/<link_id>.<ext>             screenshot, image, pdf, monolith
    archives/<collection_id>/<link_id>_readability.json  readable text
    archives/preview/<collection_id>/<link_id>.jpeg      preview thumbnail
"""

from __future__ import annotations

ARCHIVES_ROOT = "archives"
PREVIEW_ROOT = f"{ARCHIVES_ROOT}/preview"


def archive_folder(collection_id: int) -> str:
    return f"{ARCHIVES_ROOT}/{collection_id}"


def preview_folder(collection_id: int) -> str:
    return f"{PREVIEW_ROOT}/{collection_id}"


def archive_path(collection_id: int, link_id: int, extension: str) -> str:
    """Path of the ``<link_id>.<extension>`` file in the collection's archive folder."""
    return f"{archive_folder(collection_id)}/{link_id}.{extension}"


def readability_path(collection_id: int, link_id: int) -> str:
    return f"{archive_folder(collection_id)}/{link_id}_readability.json"


def preview_path(collection_id: int, link_id: int) -> str:
    return f"{preview_folder(collection_id)}/{link_id}.jpeg"
