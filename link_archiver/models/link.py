"""Link, owner and tag models for the archival pipeline.

Defines Pydantic v2 models for the records the orchestrator reads and the
partial patches it writes back.  Record models are frozen; the pipeline
never mutates a ``Link`` in place.  Producers and finalization persist
changes through ``ILinkRepository.update_link`` and the orchestrator
re-reads the record when it needs the current state.

Artifact fields (``readable``, ``image``, ``monolith``, ``pdf``,
``preview``) hold one of three things:

    None            -- not produced yet ("unset")
    "unavailable"   -- archiving was attempted/skipped and gave nothing
    "<path>"        -- relative path of the stored artifact
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNAVAILABLE = "unavailable"

# Title served by Cloudflare's browser-check interstitial.  A link whose
# name is still this placeholder gets the real page title in finalization.
CAPTCHA_PLACEHOLDER_TITLE = "Just a moment..."

ARTIFACT_FIELDS: tuple[str, ...] = ("readable", "image", "monolith", "pdf", "preview")


class LinkType(str, Enum):  # noqa: UP042
    """Classification of the bookmarked resource from its Content-Type."""

    URL = "url"
    PDF = "pdf"
    IMAGE = "image"


class ImageExtension(str, Enum):  # noqa: UP042
    """File extension used when archiving a raw image."""

    PNG = "png"
    JPEG = "jpeg"


class AiTaggingMethod(str, Enum):  # noqa: UP042
    """How (and whether) a user's links are tagged by an LLM.

    GENERATE lets the model invent tags, EXISTING restricts it to tags the
    user already has, PREDEFINED restricts it to the user's configured list.
    """

    DISABLED = "DISABLED"
    GENERATE = "GENERATE"
    EXISTING = "EXISTING"
    PREDEFINED = "PREDEFINED"


class User(BaseModel):
    """Collection owner with per-artifact archival defaults."""

    model_config = ConfigDict(frozen=True)

    id: int
    archive_as_screenshot: bool = True
    archive_as_monolith: bool = True
    archive_as_pdf: bool = True
    archive_as_readable: bool = True
    archive_as_wayback_machine: bool = False
    ai_tagging_method: AiTaggingMethod = AiTaggingMethod.DISABLED
    ai_predefined_tags: list[str] = Field(default_factory=list)

    @property
    def ai_tagging_enabled(self) -> bool:
        return self.ai_tagging_method != AiTaggingMethod.DISABLED


class Tag(BaseModel):
    """A tag attached to a link.

    Each override is ``None`` when the tag does not express an opinion
    about that artifact kind.  A tag with at least one override is an
    *archival tag* and takes the link's settings away from the owner's
    defaults (see :func:`link_archiver.services.archival_settings.resolve_archival_settings`).
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    archive_as_screenshot: bool | None = None
    archive_as_monolith: bool | None = None
    archive_as_pdf: bool | None = None
    archive_as_readable: bool | None = None
    archive_as_wayback_machine: bool | None = None
    ai_tag: bool | None = None


def is_archival_tag(tag: Tag) -> bool:
    """True when *tag* carries at least one archival override."""
    return any(
        value is not None
        for value in (
            tag.archive_as_screenshot,
            tag.archive_as_monolith,
            tag.archive_as_pdf,
            tag.archive_as_readable,
            tag.archive_as_wayback_machine,
            tag.ai_tag,
        )
    )


class Link(BaseModel):
    """A bookmarked resource together with its owner and tags."""

    model_config = ConfigDict(frozen=True)

    id: int
    collection_id: int
    owner: User
    url: str | None = None
    name: str = ""
    description: str = ""
    type: LinkType = LinkType.URL
    readable: str | None = None
    image: str | None = None
    monolith: str | None = None
    pdf: str | None = None
    preview: str | None = None
    text_content: str | None = None
    ai_tagged: bool = False
    last_preserved: datetime | None = None
    tags: list[Tag] = Field(default_factory=list)


class LinkPatch(BaseModel):
    """Partial update of a link record.

    Only fields that were explicitly set are written; everything else is
    left untouched.  Use :meth:`changes` to get that subset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    type: LinkType | None = None
    readable: str | None = None
    image: str | None = None
    monolith: str | None = None
    pdf: str | None = None
    preview: str | None = None
    text_content: str | None = None
    ai_tagged: bool | None = None
    last_preserved: datetime | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)

    def is_empty(self) -> bool:
        return not self.model_fields_set
