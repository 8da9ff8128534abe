"""Shared fixtures for the packintake test suite."""

import pytest

from constants import Constants, HostFamily
from repository.provider_registry import ProviderRegistry
from repository.providers import Manifest, ProviderClient
from repository.resolver import VcsResolver
from repository.url_normalize import RepoRef


class FakeDriver(ProviderClient):
    """In-memory driver for https://example.org/<owner>/<repo> repositories."""

    family = HostFamily.GITHUB
    root = "main"
    manifest = {"name": "acme/widget"}
    root_error = None
    manifest_error = None

    @classmethod
    def supports(cls, url):
        if not url.startswith("https://example.org/"):
            return None
        owner, _, repo = url[len("https://example.org/"):].partition("/")
        return RepoRef("example.org", owner, repo)

    def root_identifier(self):
        if self.root_error is not None:
            raise self.root_error
        return self.root

    def manifest_at(self, identifier):
        if self.manifest_error is not None:
            raise self.manifest_error
        return Manifest.from_dict(self.manifest)

    def repository_identity(self):
        return ("example.org", "77")


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants mutation made by config or env overrides."""
    saved = {
        k: (list(v) if isinstance(v, list) else v)
        for k, v in vars(Constants).items()
        if k.isupper()
    }
    yield
    for k, v in saved.items():
        setattr(Constants, k, v)


@pytest.fixture
def fake_driver():
    return FakeDriver


@pytest.fixture
def make_resolver():
    """Build a resolver whose only driver is a FakeDriver variant.

    Keyword arguments override FakeDriver class attributes
    (root, manifest, root_error, manifest_error).
    """
    def _make(**attrs):
        driver = type("ConfiguredFakeDriver", (FakeDriver,), attrs)
        return VcsResolver(ProviderRegistry([driver]))
    return _make
