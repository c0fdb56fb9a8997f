"""LLM-based tagging of archived links.

The owner's :class:`AiTaggingMethod` decides what the model may answer:

    GENERATE    -- any short tags it sees fit
    EXISTING    -- only tags the owner already has
    PREDEFINED  -- only the owner's configured list

The model is asked for a JSON array of strings.  Whatever it returns is
filtered against the allowed vocabulary (case-insensitively, keeping the
vocabulary's spelling), de-duplicated and capped before the tags are
attached.  Tagging is best-effort: provider errors are logged and the
link is left untagged.
"""

from __future__ import annotations

import json
import re

import structlog

from link_archiver.interfaces.link_repository import ILinkRepository
from link_archiver.interfaces.llm_provider import ILLMProvider
from link_archiver.models.link import AiTaggingMethod, LinkPatch, User
from link_archiver.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

MAX_TAGS = 5
_MAX_TAG_LENGTH = 50
_MAX_DESCRIPTION_CHARS = 4000

_SYSTEM_PROMPT = (
    "You label bookmarked web pages with short topical tags. "
    "Respond with a JSON array of strings and nothing else."
)

_GENERATE_PROMPT = """\
Suggest up to {max_tags} concise tags (one to three words each) for the page below.

Page description:
{description}
"""

_CHOOSE_PROMPT = """\
Pick up to {max_tags} tags for the page below. Use ONLY tags from this list, spelled exactly as given:
{allowed}

If none of them fit, return [].

Page description:
{description}
"""


def parse_tag_response(response: str) -> list[str]:
    """Extract a list of tag names from an LLM response.

    Accepts a bare JSON array, one wrapped in a markdown code fence, or an
    array embedded in surrounding prose.  Returns ``[]`` if nothing usable
    is found.
    """
    text = response.strip()

    fence_match = _JSON_FENCE_RE.search(text)
    if fence_match:
        text = fence_match.group(1).strip()

    if not text.startswith("["):
        bracket_start = text.find("[")
        bracket_end = text.rfind("]")
        if bracket_start != -1 and bracket_end > bracket_start:
            text = text[bracket_start : bracket_end + 1]

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("tag_response_parse_failed", error=str(exc), response_preview=response[:200])
        return []

    if not isinstance(parsed, list):
        return []
    return [item.strip() for item in parsed if isinstance(item, str) and item.strip()]


def select_tags(candidates: list[str], allowed: list[str] | None, max_tags: int = MAX_TAGS) -> list[str]:
    """Filter *candidates* against *allowed* (``None`` allows anything)."""
    vocabulary = {name.casefold(): name for name in allowed} if allowed is not None else None

    selected: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        key = candidate.casefold()
        if key in seen or len(candidate) > _MAX_TAG_LENGTH:
            continue
        if vocabulary is not None:
            if key not in vocabulary:
                continue
            candidate = vocabulary[key]
        seen.add(key)
        selected.append(candidate)
        if len(selected) >= max_tags:
            break
    return selected


class AutoTagger:
    """Tags a link through the configured LLM provider."""

    def __init__(self, repository: ILinkRepository, llm_provider: ILLMProvider | None) -> None:
        self._repository = repository
        self._llm = llm_provider

    async def auto_tag(self, user: User, link_id: int, description: str | None) -> list[str]:
        """Attach model-suggested tags to the link and mark it tagged.

        Returns the tag names that were attached (possibly empty).
        """
        if self._llm is None or not self._llm.is_available():
            logger.info("auto_tag_skipped", link_id=link_id, reason="no_provider")
            return []
        if not user.ai_tagging_enabled:
            return []

        description = await self._describe(link_id, description)
        if not description:
            logger.info("auto_tag_skipped", link_id=link_id, reason="no_description")
            return []

        allowed = await self._allowed_tags(user)
        if allowed is not None and not allowed:
            logger.info(
                "auto_tag_skipped",
                link_id=link_id,
                reason="empty_vocabulary",
                method=user.ai_tagging_method.value,
            )
            return []

        if allowed is None:
            prompt = _GENERATE_PROMPT.format(max_tags=MAX_TAGS, description=description)
        else:
            prompt = _CHOOSE_PROMPT.format(
                max_tags=MAX_TAGS,
                allowed=json.dumps(allowed, ensure_ascii=False),
                description=description,
            )

        try:
            response = await self._llm.complete(_SYSTEM_PROMPT, prompt)
        except LLMError as exc:
            logger.error(
                "auto_tag_failed",
                link_id=link_id,
                provider=self._llm.get_provider_name(),
                error=str(exc),
            )
            return []

        tags = select_tags(parse_tag_response(response), allowed)
        if tags:
            await self._repository.connect_tags(link_id, user.id, tags)
        await self._repository.update_link(link_id, LinkPatch(ai_tagged=True))

        logger.info(
            "link_auto_tagged",
            link_id=link_id,
            provider=self._llm.get_provider_name(),
            tags=tags,
        )
        return tags

    async def _describe(self, link_id: int, description: str | None) -> str:
        if description and description.strip():
            return description.strip()[:_MAX_DESCRIPTION_CHARS]

        link = await self._repository.get_link(link_id)
        if link is None:
            return ""
        fallback = link.text_content or link.name or ""
        return fallback.strip()[:_MAX_DESCRIPTION_CHARS]

    async def _allowed_tags(self, user: User) -> list[str] | None:
        if user.ai_tagging_method == AiTaggingMethod.EXISTING:
            return await self._repository.list_tag_names(user.id)
        if user.ai_tagging_method == AiTaggingMethod.PREDEFINED:
            return [name for name in user.ai_predefined_tags if name.strip()]
        return None
