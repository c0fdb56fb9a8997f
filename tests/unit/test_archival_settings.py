"""Unit tests for resolve_archival_settings -- tag precedence over user defaults."""

from __future__ import annotations

from link_archiver.models.archive import ArchivalSettings
from link_archiver.models.link import AiTaggingMethod
from link_archiver.services.archival_settings import resolve_archival_settings
from tests.conftest import make_tag, make_user


class TestResolveArchivalSettings:
    def test_no_tags_uses_user_defaults_exactly(self) -> None:
        user = make_user(
            archive_as_screenshot=False,
            archive_as_monolith=True,
            archive_as_pdf=True,
            archive_as_readable=False,
            archive_as_wayback_machine=True,
            ai_tagging_method=AiTaggingMethod.PREDEFINED,
        )
        assert resolve_archival_settings([], user) == ArchivalSettings(
            archive_as_screenshot=False,
            archive_as_monolith=True,
            archive_as_pdf=True,
            archive_as_readable=False,
            archive_as_wayback_machine=True,
            ai_tag=True,
        )

    def test_plain_tags_are_ignored(self) -> None:
        user = make_user()
        settings = resolve_archival_settings([make_tag(1, "news"), make_tag(2, "later")], user)
        assert settings.archive_as_screenshot is True
        assert settings.ai_tag is False

    def test_archival_tag_overrides_user(self) -> None:
        user = make_user()  # screenshot/monolith/pdf/readable all on
        tag = make_tag(1, "pdf-only", archive_as_pdf=True)
        assert resolve_archival_settings([tag], user) == ArchivalSettings(archive_as_pdf=True)

    def test_or_across_archival_tags(self) -> None:
        user = make_user()
        tags = [
            make_tag(1, "a", archive_as_pdf=True, archive_as_screenshot=False),
            make_tag(2, "b", archive_as_screenshot=True, archive_as_wayback_machine=True),
            make_tag(3, "plain"),
        ]
        settings = resolve_archival_settings(tags, user)
        assert settings.archive_as_pdf is True
        assert settings.archive_as_screenshot is True
        assert settings.archive_as_wayback_machine is True
        assert settings.archive_as_monolith is False
        assert settings.archive_as_readable is False
        assert settings.ai_tag is False

    def test_all_false_archival_tag_disables_everything(self) -> None:
        user = make_user(ai_tagging_method=AiTaggingMethod.GENERATE)
        tag = make_tag(1, "nothing", archive_as_monolith=False)
        assert resolve_archival_settings([tag], user) == ArchivalSettings()
