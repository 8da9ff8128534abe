"""Tests for the package candidate aggregate."""

from unittest.mock import MagicMock

import pytest

from package_candidate import PackageCandidate, PackageNameError
from repository.providers import Manifest
from repository.resolver import ResolutionResult
from repository.url_normalize import LocationProblem
from versioning.models import VersionRecord


class TestNameParts:

    def test_vendor_and_package(self):
        candidate = PackageCandidate(name="acme/widget")
        assert candidate.vendor == "acme"
        assert candidate.package_name == "widget"

    def test_no_slash(self):
        candidate = PackageCandidate(name="widget")
        assert candidate.vendor == "widget"
        assert candidate.package_name == "widget"

    def test_require_name(self):
        assert PackageCandidate(name="acme/widget").require_name() == "acme/widget"
        with pytest.raises(PackageNameError):
            PackageCandidate().require_name()


class TestSetRepository:

    def test_adopts_manifest_name_and_canonical_url(self, make_resolver):
        candidate = PackageCandidate()
        result = candidate.set_repository(
            "https://example.org/acme/widget",
            resolver=make_resolver(manifest={"name": "  acme/widget  "}),
        )
        assert result.succeeded
        assert candidate.name == "acme/widget"
        assert candidate.repository == "https://example.org/acme/widget"
        assert candidate.remote_id == "example.org/77"
        assert candidate.repository_modified is True

    def test_keeps_existing_name(self, make_resolver):
        candidate = PackageCandidate(name="mine/pkg")
        candidate.set_repository("https://example.org/acme/widget", resolver=make_resolver())
        assert candidate.name == "mine/pkg"

    def test_canonical_url_replaces_submitted_form(self):
        resolver = MagicMock()

        def _resolve(location):
            return ResolutionResult(
                location=location,
                driver=object(),
                root_identifier="main",
                manifest=Manifest(name="foo/bar"),
                canonical_url="https://github.com/Foo/Bar",
                remote_id="github.com/1",
            )
        resolver.resolve.side_effect = _resolve

        candidate = PackageCandidate.from_repository("git@github.com:foo/bar.git", resolver=resolver)

        assert candidate.repository == "https://github.com/Foo/Bar"
        assert candidate.location.raw == "git@github.com:foo/bar.git"

    def test_flagged_location_kept_normalized(self, make_resolver):
        candidate = PackageCandidate()
        result = candidate.set_repository("http://example.org/acme/widget", resolver=make_resolver())
        assert not result.succeeded
        assert candidate.location.problem == LocationProblem.INSECURE_SCHEME
        assert candidate.repository == "http://example.org/acme/widget"
        assert candidate.remote_id is None
        assert candidate.name == ""

    def test_browsable_repository(self):
        candidate = PackageCandidate()
        assert candidate.browsable_repository is None
        resolver = MagicMock()
        resolver.resolve.side_effect = lambda location: ResolutionResult(location=location)
        candidate.set_repository("git@bitbucket.org:team/repo.git", resolver=resolver)
        assert candidate.repository == "https://bitbucket.org/team/repo.git"
        assert candidate.browsable_repository == "https://bitbucket.org/team/repo"

    def test_resolution_reused_by_validation(self, make_resolver):
        resolver = make_resolver()
        candidate = PackageCandidate.from_repository("https://example.org/acme/widget", resolver=resolver)
        resolver.resolve = MagicMock()
        assert candidate.validate() == []
        resolver.resolve.assert_not_called()

    def test_mark_accepted(self, make_resolver):
        candidate = PackageCandidate.from_repository("https://example.org/acme/widget", resolver=make_resolver())
        candidate.mark_accepted()
        assert candidate.repository_modified is False
        assert candidate.to_dict() == {
            "name": "acme/widget",
            "repository": "https://example.org/acme/widget",
            "remote_id": "example.org/77",
        }


class TestVersions:

    def test_lookup_and_sorting(self):
        candidate = PackageCandidate(name="acme/widget")
        candidate.set_versions([
            VersionRecord("1.0.0"),
            VersionRecord("dev-main", is_default_branch=True),
            VersionRecord("2.0.0"),
        ])
        assert candidate.get_version("DEV-MAIN").is_default_branch
        assert candidate.get_version("3.0.0") is None
        assert [v.normalized_version for v in candidate.sorted_versions()] == ["dev-main", "2.0.0", "1.0.0"]
        assert len(candidate.versions) == 3

    def test_tag_pattern_empty_is_none(self):
        candidate = PackageCandidate()
        candidate.tag_pattern = ""
        assert candidate.tag_pattern is None
        candidate.tag_pattern = "^v\\d+"
        assert candidate.tag_pattern == "^v\\d+"
