"""
Tests for version resolution and release listing.
"""

import pytest

from conftest import FakeReleaseIndex, make_release
from godot_installer.core.errors import InvalidVersionFormatError, NoReleaseFoundError
from godot_installer.core.services.versions import VersionResolver, list_published_versions


class TestVersionResolver:
    def test_explicit_version_skips_index(self):
        index = FakeReleaseIndex()
        version = VersionResolver(index).resolve("4.3")
        assert version.text == "4.3"
        assert index.calls == []

    def test_explicit_version_is_not_checked_for_existence(self):
        assert VersionResolver(FakeReleaseIndex()).resolve("99.0.1").text == "99.0.1"

    def test_invalid_version(self):
        with pytest.raises(InvalidVersionFormatError):
            VersionResolver(FakeReleaseIndex()).resolve("4.x")

    @pytest.mark.parametrize("requested", [None, ""])
    def test_latest_when_unspecified(self, requested):
        index = FakeReleaseIndex([make_release("4.4.1-stable")], latest="4.4.1-stable")
        version = VersionResolver(index).resolve(requested)
        assert version.text == "4.4.1"
        assert index.count("latest") == 1

    def test_index_unreachable(self):
        with pytest.raises(NoReleaseFoundError):
            VersionResolver(FakeReleaseIndex()).resolve(None)

    def test_latest_tag_without_version(self):
        index = FakeReleaseIndex([make_release("nightly")], latest="nightly")
        with pytest.raises(NoReleaseFoundError, match="nightly"):
            VersionResolver(index).resolve(None)


class TestListPublishedVersions:
    def test_newest_first(self):
        index = FakeReleaseIndex([
            make_release("4.3-stable"),
            make_release("4.10-stable"),
            make_release("4.4.1-stable"),
            make_release("3.6-stable"),
        ])
        versions = list_published_versions(index)
        assert [v.text for v in versions] == ["4.10", "4.4.1", "4.3", "3.6"]

    def test_collapses_duplicate_versions(self):
        index = FakeReleaseIndex([
            make_release("4.5-rc1"),
            make_release("4.5-stable"),
            make_release("4.4-stable"),
        ])
        assert [v.text for v in list_published_versions(index)] == ["4.5", "4.4"]

    def test_skips_tags_without_versions(self):
        index = FakeReleaseIndex([make_release("nightly"), make_release("4.2-stable")])
        assert [v.text for v in list_published_versions(index)] == ["4.2"]

    def test_empty_index(self):
        with pytest.raises(NoReleaseFoundError):
            list_published_versions(FakeReleaseIndex())
