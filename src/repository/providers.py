"""Adapter contract shared by the per-host repository clients.

An adapter is built for one normalized repository URL and exposes the few
read-only capabilities the resolver needs: the default ref, the manifest at
a ref, the canonical public URL and, where the host has one, a stable
repository identity.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from common.http_client import NO_RESPONSE, robust_get
from common.logging_utils import extra_context, safe_url
from constants import Constants, HostFamily

from .errors import ManifestParseError, TransportError
from .url_normalize import RepoRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Manifest:
    """Package manifest read from the repository."""
    name: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Manifest":
        """Build a manifest from decoded JSON, rejecting non-objects."""
        if not isinstance(data, dict):
            raise ManifestParseError(
                f"Expected a JSON object at the top level, got {type(data).__name__}"
            )
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise ManifestParseError('The "name" property must be a string')
        extra = data.get("extra")
        return cls(name=name, extra=extra if isinstance(extra, dict) else {}, raw=data)

    @classmethod
    def from_text(cls, text: str) -> "Manifest":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(f"{Constants.MANIFEST_FILE} does not contain valid JSON: {exc}") from exc
        return cls.from_dict(data)

    @property
    def branch_aliases(self) -> Dict[str, str]:
        aliases = self.extra.get("branch-alias")
        return aliases if isinstance(aliases, dict) else {}


class ProviderClient(ABC):
    """Read-only adapter for one repository on one hosting family."""

    family: HostFamily

    def __init__(self, url: str, ref: RepoRef):
        self.url = url
        self.ref = ref

    @classmethod
    @abstractmethod
    def supports(cls, url: str) -> Optional[RepoRef]:
        """Return the parsed reference when this adapter can handle ``url``."""

    @abstractmethod
    def root_identifier(self) -> str:
        """Return the default branch (or ref) of the repository."""

    @abstractmethod
    def manifest_at(self, identifier: str) -> Manifest:
        """Fetch and decode the manifest stored at ``identifier``."""

    def canonical_url(self) -> str:
        return self.url

    def repository_identity(self) -> Optional[Tuple[str, str]]:
        """Return ``(host, id)`` for hosts exposing a stable numeric id."""
        return None

    # Shared transport helpers

    def _get_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        status, _, body = robust_get(url, headers=headers)
        if status == NO_RESPONSE:
            raise TransportError(body)
        if status != 200:
            logger.info(
                "Repository API returned an error status",
                extra=extra_context(
                    event="http_response",
                    component=self.family.value,
                    outcome="error_status",
                    status_code=status,
                    target=safe_url(url)
                )
            )
            raise TransportError(
                f'The "{safe_url(url)}" file could not be downloaded (HTTP {status})',
                status=status,
            )
        return body

    def _get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        body = self._get_text(url, headers=headers)
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise TransportError(f"Invalid JSON received from {safe_url(url)}: {exc}") from exc
