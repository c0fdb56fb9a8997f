"""Effective archival settings for one link.

A link's tags take precedence over its owner's defaults, but only tags
that actually carry an override count.  When several archival tags are
attached, an artifact kind is enabled if ANY of them enables it.
"""

from __future__ import annotations

from collections.abc import Iterable

from link_archiver.models.archive import ArchivalSettings
from link_archiver.models.link import Tag, User, is_archival_tag


def resolve_archival_settings(tags: Iterable[Tag], owner: User) -> ArchivalSettings:
    """Combine archival tags, or fall back to *owner*'s defaults."""
    archival_tags = [tag for tag in tags if is_archival_tag(tag)]

    if archival_tags:
        return ArchivalSettings(
            archive_as_screenshot=any(tag.archive_as_screenshot for tag in archival_tags),
            archive_as_monolith=any(tag.archive_as_monolith for tag in archival_tags),
            archive_as_pdf=any(tag.archive_as_pdf for tag in archival_tags),
            archive_as_readable=any(tag.archive_as_readable for tag in archival_tags),
            archive_as_wayback_machine=any(tag.archive_as_wayback_machine for tag in archival_tags),
            ai_tag=any(tag.ai_tag for tag in archival_tags),
        )

    return ArchivalSettings(
        archive_as_screenshot=owner.archive_as_screenshot,
        archive_as_monolith=owner.archive_as_monolith,
        archive_as_pdf=owner.archive_as_pdf,
        archive_as_readable=owner.archive_as_readable,
        archive_as_wayback_machine=owner.archive_as_wayback_machine,
        ai_tag=owner.ai_tagging_enabled,
    )
