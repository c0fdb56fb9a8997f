"""link_archiver domain models -- re-exports all public model classes.

Import from here rather than from the individual modules::

    from link_archiver.models import Link, LinkPatch, ArchivalSettings
"""

from link_archiver.models.archive import (
    ArchivalSettings,
    CaptchaCookie,
    CaptchaSolveResult,
    CaptchaStatus,
    LinkTypeResolution,
)
from link_archiver.models.link import (
    ARTIFACT_FIELDS,
    CAPTCHA_PLACEHOLDER_TITLE,
    UNAVAILABLE,
    AiTaggingMethod,
    ImageExtension,
    Link,
    LinkPatch,
    LinkType,
    Tag,
    User,
    is_archival_tag,
)

__all__ = [
    "ARTIFACT_FIELDS",
    "CAPTCHA_PLACEHOLDER_TITLE",
    "UNAVAILABLE",
    "AiTaggingMethod",
    "ArchivalSettings",
    "CaptchaCookie",
    "CaptchaSolveResult",
    "CaptchaStatus",
    "ImageExtension",
    "Link",
    "LinkPatch",
    "LinkType",
    "LinkTypeResolution",
    "Tag",
    "User",
    "is_archival_tag",
]
