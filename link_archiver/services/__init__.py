"""Domain services used by the archival pipeline."""

from link_archiver.services.archival_settings import resolve_archival_settings
from link_archiver.services.auto_tagger import AutoTagger
from link_archiver.services.link_type_resolver import LinkTypeResolver, classify_content_type

__all__ = [
    "AutoTagger",
    "LinkTypeResolver",
    "classify_content_type",
    "resolve_archival_settings",
]
