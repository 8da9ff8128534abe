"""Typed failures raised while resolving a repository to its manifest."""
from __future__ import annotations

from typing import Optional


class ResolutionError(Exception):
    """Base class for every failure the resolver captures as data."""

    kind = "resolution_error"


class NoDriverError(ResolutionError):
    """No adapter recognizes the repository URL."""

    kind = "no_driver"

    def __init__(self, url: str):
        super().__init__(f"No driver found to handle VCS repository {url}")
        self.url = url


class TransportError(ResolutionError):
    """The hosting API could not be reached or answered with an error status."""

    kind = "transport"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    @property
    def not_found(self) -> bool:
        return self.status == 404


class ManifestParseError(ResolutionError):
    """The manifest was fetched but is not a valid JSON object."""

    kind = "manifest_parse"
