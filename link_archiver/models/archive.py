"""Ephemeral models produced while archiving one link.

None of these are persisted: ``ArchivalSettings`` is derived from tags and
the owner on every run, ``LinkTypeResolution`` comes from the header probe,
and ``CaptchaSolveResult`` describes what the captcha backend returned.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from link_archiver.models.link import ImageExtension, LinkType


class ArchivalSettings(BaseModel):
    """Effective per-link switches for each artifact kind."""

    model_config = ConfigDict(frozen=True)

    archive_as_screenshot: bool = False
    archive_as_monolith: bool = False
    archive_as_pdf: bool = False
    archive_as_readable: bool = False
    archive_as_wayback_machine: bool = False
    ai_tag: bool = False


class LinkTypeResolution(BaseModel):
    """Outcome of the Content-Type probe."""

    model_config = ConfigDict(frozen=True)

    link_type: LinkType = LinkType.URL
    image_extension: ImageExtension = ImageExtension.PNG


class CaptchaStatus(str, Enum):  # noqa: UP042
    """Status reported for a captcha solve attempt.

    ERROR -- transport or parse failure talking to the backend
    FAIL  -- backend answered with a non-200 status
    SKIP  -- no backend configured
    SUCCESS / anything the backend reports is passed through verbatim
    """

    ERROR = "error"
    FAIL = "fail"
    SKIP = "skip"
    SUCCESS = "success"


_UNSOLVED_STATUSES = frozenset({CaptchaStatus.ERROR.value, CaptchaStatus.FAIL.value, CaptchaStatus.SKIP.value})


class CaptchaCookie(BaseModel):
    """A cookie returned by the captcha backend, in its wire format."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    value: str
    domain: str
    path: str = "/"
    secure: bool = False
    expires: float | None = Field(default=None, validation_alias=AliasChoices("expires", "expiry"))
    http_only: bool | None = Field(default=None, alias="httpOnly")
    same_site: Literal["Strict", "Lax", "None"] | None = Field(default=None, alias="sameSite")

    def to_playwright(self) -> dict[str, Any]:
        """Convert to the dict shape ``BrowserContext.add_cookies`` expects."""
        cookie: dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
            "secure": self.secure,
        }
        # Session cookies come back with expires <= 0; Playwright wants them omitted.
        if self.expires is not None and self.expires > 0:
            cookie["expires"] = self.expires
        if self.http_only is not None:
            cookie["httpOnly"] = self.http_only
        if self.same_site is not None:
            cookie["sameSite"] = self.same_site
        return cookie


class CaptchaSolveResult(BaseModel):
    """Result of :meth:`ICaptchaSolver.solve`.

    ``status`` is kept as a plain string because successful responses are
    passed through from the backend verbatim; compare against
    :class:`CaptchaStatus` values.
    """

    model_config = ConfigDict(frozen=True)

    status: str
    cookies: list[CaptchaCookie] | None = None

    @property
    def solved(self) -> bool:
        """True for any status other than error, fail or skip."""
        return self.status not in _UNSOLVED_STATUSES

    @property
    def has_cookies(self) -> bool:
        return self.solved and bool(self.cookies)
