"""Bitbucket Cloud adapter (REST 2.0)."""
from __future__ import annotations

import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from constants import Constants, HostFamily

from .providers import Manifest, ProviderClient
from .url_normalize import RepoRef

_SUPPORTED_RE = re.compile(
    r"^https?://bitbucket\.org/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git|/)?$", re.IGNORECASE
)


class BitbucketDriver(ProviderClient):
    """Adapter for repositories hosted on bitbucket.org."""

    family = HostFamily.BITBUCKET

    def __init__(self, url: str, ref: RepoRef):
        super().__init__(url, ref)
        self._repo_data: Optional[Dict[str, Any]] = None

    @classmethod
    def supports(cls, url: str) -> Optional[RepoRef]:
        m = _SUPPORTED_RE.match(url)
        if not m:
            return None
        return RepoRef(host="bitbucket.org", owner=m.group("owner"), repo=m.group("repo"))

    def _repo_url(self) -> str:
        return f"{Constants.BITBUCKET_API_BASE}/repositories/{quote(self.ref.owner)}/{quote(self.ref.repo)}"

    def get_repo_data(self) -> Dict[str, Any]:
        if self._repo_data is None:
            data = self._get_json(self._repo_url())
            self._repo_data = data if isinstance(data, dict) else {}
        return self._repo_data

    def root_identifier(self) -> str:
        mainbranch = self.get_repo_data().get("mainbranch") or {}
        return mainbranch.get("name") or "master"

    def manifest_at(self, identifier: str) -> Manifest:
        url = f"{self._repo_url()}/src/{quote(identifier, safe='')}/{Constants.MANIFEST_FILE}"
        return Manifest.from_text(self._get_text(url))

    def canonical_url(self) -> str:
        return f"https://bitbucket.org/{self.ref.owner}/{self.ref.repo}.git"
