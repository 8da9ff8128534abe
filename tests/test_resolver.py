"""Tests for adapter selection and repository resolution."""

from unittest.mock import patch

import pytest

from repository.bitbucket import BitbucketDriver
from repository.errors import ManifestParseError, NoDriverError, TransportError
from repository.github import GitHubDriver
from repository.gitlab import GitLabDriver
from repository.provider_registry import ProviderRegistry
from repository.resolver import ResolutionResult
from repository.url_normalize import RepoRef, inspect_location

WIDGET_URL = "https://example.org/acme/widget"


class TestProviderRegistry:

    @pytest.mark.parametrize("url,driver_cls", [
        ("https://github.com/foo/bar", GitHubDriver),
        ("https://gitlab.com/foo/bar", GitLabDriver),
        ("https://bitbucket.org/foo/bar.git", BitbucketDriver),
    ])
    def test_detects_family(self, url, driver_cls):
        driver = ProviderRegistry().get_driver(url)
        assert isinstance(driver, driver_cls)
        assert driver.url == url

    def test_no_driver(self):
        with pytest.raises(NoDriverError) as excinfo:
            ProviderRegistry().get_driver("https://example.org/a/b")
        assert str(excinfo.value) == "No driver found to handle VCS repository https://example.org/a/b"

    def test_register_driver(self, fake_driver):
        registry = ProviderRegistry()
        registry.register_driver(fake_driver)
        assert isinstance(registry.get_driver(WIDGET_URL), fake_driver)

    def test_registered_driver_checked_after_builtins(self, fake_driver):
        class Greedy(fake_driver):
            @classmethod
            def supports(cls, url):
                return RepoRef("any", "a", "b")

        registry = ProviderRegistry()
        registry.register_driver(Greedy)
        assert isinstance(registry.get_driver("https://github.com/foo/bar"), GitHubDriver)
        assert isinstance(registry.get_driver("https://gitlab.com/foo/bar"), GitLabDriver)
        assert type(registry.get_driver(WIDGET_URL)) is Greedy

    def test_first_match_wins(self, fake_driver):
        class Greedy(fake_driver):
            @classmethod
            def supports(cls, url):
                return RepoRef("any", "a", "b")

        registry = ProviderRegistry([Greedy, fake_driver])
        assert type(registry.get_driver(WIDGET_URL)) is Greedy


class TestVcsResolver:

    def test_success(self, make_resolver):
        result = make_resolver().resolve(inspect_location(WIDGET_URL))
        assert result.succeeded
        assert result.root_identifier == "main"
        assert result.manifest.name == "acme/widget"
        assert result.canonical_url == WIDGET_URL
        assert result.remote_id == "example.org/77"
        assert result.error is None

    def test_skips_flagged_location(self, make_resolver):
        with patch.object(ProviderRegistry, "get_driver") as mock_get_driver:
            result = make_resolver().resolve(inspect_location("http://example.org/acme/widget"))
        mock_get_driver.assert_not_called()
        assert result.driver is None
        assert result.error is None
        assert not result.succeeded

    def test_no_driver_recorded(self, make_resolver):
        result = make_resolver().resolve(inspect_location("https://unknown.example/a/b"))
        assert result.driver is None
        assert isinstance(result.error, NoDriverError)
        assert result.error_message.startswith("[NoDriverError] No driver found")

    def test_root_lookup_failure_drops_driver(self, make_resolver):
        resolver = make_resolver(root_error=TransportError("Request failed: connection refused"))
        result = resolver.resolve(inspect_location(WIDGET_URL))
        assert result.driver is None
        assert isinstance(result.error, TransportError)

    def test_unexpected_exception_captured(self, make_resolver):
        result = make_resolver(root_error=RuntimeError("kaboom")).resolve(inspect_location(WIDGET_URL))
        assert result.driver is None
        assert result.error_message == "[RuntimeError] kaboom"

    def test_manifest_not_found_keeps_driver(self, make_resolver):
        resolver = make_resolver(manifest_error=TransportError("not there", status=404))
        result = resolver.resolve(inspect_location(WIDGET_URL))
        assert result.driver is not None
        assert result.root_identifier == "main"
        assert result.manifest is None
        assert result.error.not_found
        assert result.canonical_url is None

    def test_manifest_parse_error_keeps_driver(self, make_resolver):
        result = make_resolver(manifest_error=ManifestParseError("bad json")).resolve(inspect_location(WIDGET_URL))
        assert result.driver is not None
        assert isinstance(result.error, ManifestParseError)


class TestResolutionResult:

    def test_error_message_none_without_error(self):
        assert ResolutionResult(location=inspect_location(WIDGET_URL)).error_message is None
