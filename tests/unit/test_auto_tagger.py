"""Unit tests for the AutoTagger and its response parsing."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from link_archiver.models.link import AiTaggingMethod
from link_archiver.services.auto_tagger import AutoTagger, parse_tag_response, select_tags
from link_archiver.utils.errors import LLMError
from tests.conftest import InMemoryLinkRepository, make_link, make_user


def _llm(response: str = '["Python", "web"]') -> MagicMock:
    llm = MagicMock()
    llm.complete = AsyncMock(return_value=response)
    llm.is_available = MagicMock(return_value=True)
    llm.get_provider_name = MagicMock(return_value="fake")
    return llm


class TestParseTagResponse:
    def test_bare_array(self) -> None:
        assert parse_tag_response('["a", "b"]') == ["a", "b"]

    def test_fenced_array(self) -> None:
        assert parse_tag_response('```json\n["a", " b "]\n```') == ["a", "b"]

    def test_array_inside_prose(self) -> None:
        assert parse_tag_response('Sure! Here you go: ["news", "tech"] Hope it helps.') == ["news", "tech"]

    def test_non_strings_dropped(self) -> None:
        assert parse_tag_response('["a", 3, null, ""]') == ["a"]

    def test_garbage(self) -> None:
        assert parse_tag_response("no tags today") == []

    def test_object_is_rejected(self) -> None:
        assert parse_tag_response('{"tags": ["a"]}') == []


class TestSelectTags:
    def test_free_vocabulary_dedupes_and_caps(self) -> None:
        assert select_tags(["a", "A", "b", "c", "d", "e", "f"], None) == ["a", "b", "c", "d", "e"]

    def test_restricted_vocabulary_keeps_canonical_spelling(self) -> None:
        assert select_tags(["python", "Rust"], ["Python", "Go"]) == ["Python"]


class TestAutoTagger:
    @pytest.mark.asyncio
    async def test_generate_attaches_tags_and_marks_link(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.GENERATE)
        repository = InMemoryLinkRepository([make_link(owner=user)])
        llm = _llm()

        tags = await AutoTagger(repository, llm).auto_tag(user, 42, "A page about Python web frameworks")

        assert tags == ["Python", "web"]
        assert repository.connected == [(42, user.id, ["Python", "web"])]
        assert repository.links[42].ai_tagged is True
        prompt = llm.complete.call_args.args[1]
        assert "Python web frameworks" in prompt

    @pytest.mark.asyncio
    async def test_existing_restricts_to_owner_tags(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.EXISTING)
        repository = InMemoryLinkRepository([make_link(owner=user)])
        repository.tag_names[user.id] = ["Web", "Databases"]
        llm = _llm('["web", "python"]')

        tags = await AutoTagger(repository, llm).auto_tag(user, 42, "description")

        assert tags == ["Web"]
        assert '"Databases"' in llm.complete.call_args.args[1]

    @pytest.mark.asyncio
    async def test_predefined_with_empty_list_skips(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.PREDEFINED, ai_predefined_tags=[])
        repository = InMemoryLinkRepository([make_link(owner=user)])
        llm = _llm()

        assert await AutoTagger(repository, llm).auto_tag(user, 42, "description") == []
        llm.complete.assert_not_awaited()
        assert repository.updates == []

    @pytest.mark.asyncio
    async def test_falls_back_to_text_content(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.GENERATE)
        repository = InMemoryLinkRepository([make_link(owner=user, text_content="Readable body text")])
        llm = _llm()

        await AutoTagger(repository, llm).auto_tag(user, 42, None)

        assert "Readable body text" in llm.complete.call_args.args[1]

    @pytest.mark.asyncio
    async def test_no_description_anywhere_skips(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.GENERATE)
        repository = InMemoryLinkRepository([make_link(owner=user, name="", text_content=None)])
        llm = _llm()

        assert await AutoTagger(repository, llm).auto_tag(user, 42, "   ") == []
        llm.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_llm_error_is_logged_and_link_left_untagged(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.GENERATE)
        repository = InMemoryLinkRepository([make_link(owner=user)])
        llm = _llm()
        llm.complete = AsyncMock(side_effect=LLMError(message="down", provider_name="fake"))

        assert await AutoTagger(repository, llm).auto_tag(user, 42, "description") == []
        assert repository.updates == []

    @pytest.mark.asyncio
    async def test_without_provider(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.GENERATE)
        repository = InMemoryLinkRepository([make_link(owner=user)])

        assert await AutoTagger(repository, None).auto_tag(user, 42, "description") == []
