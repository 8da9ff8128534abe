"""GitHub adapter.

Uses the public REST v3 API: repository metadata supplies the default
branch, numeric id and canonical owner/name; the manifest comes from the
contents API.
"""
from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from constants import Constants, HostFamily

from .errors import ManifestParseError
from .providers import Manifest, ProviderClient
from .url_normalize import RepoRef, parse_repo_ref

_HEADERS = {"Accept": "application/vnd.github.v3+json"}


class GitHubDriver(ProviderClient):
    """Adapter for github.com and configured GitHub Enterprise hosts."""

    family = HostFamily.GITHUB

    def __init__(self, url: str, ref: RepoRef):
        super().__init__(url, ref)
        self._repo_data: Optional[Dict[str, Any]] = None

    @classmethod
    def supports(cls, url: str) -> Optional[RepoRef]:
        if not url.startswith(("https://", "http://", "git://", "git@")):
            return None
        ref = parse_repo_ref(url)
        if ref is None:
            return None
        host = ref.host[4:] if ref.host.startswith("www.") else ref.host
        if host not in [d.lower() for d in Constants.GITHUB_DOMAINS]:
            return None
        return RepoRef(host=host, owner=ref.owner, repo=ref.repo)

    @property
    def api_base(self) -> str:
        if self.ref.host == "github.com":
            return Constants.GITHUB_API_BASE
        return f"https://{self.ref.host}/api/v3"

    def _repo_path(self) -> str:
        return f"{self.api_base}/repos/{quote(self.ref.owner)}/{quote(self.ref.repo)}"

    def get_repo_data(self) -> Dict[str, Any]:
        """Fetch (once per adapter) the repository metadata document."""
        if self._repo_data is None:
            data = self._get_json(self._repo_path(), headers=_HEADERS)
            self._repo_data = data if isinstance(data, dict) else {}
        return self._repo_data

    def root_identifier(self) -> str:
        return self.get_repo_data().get("default_branch") or "master"

    def manifest_at(self, identifier: str) -> Manifest:
        url = f"{self._repo_path()}/contents/{Constants.MANIFEST_FILE}?ref={quote(identifier, safe='')}"
        data = self._get_json(url, headers=_HEADERS)
        if not isinstance(data, dict) or data.get("encoding") != "base64" or "content" not in data:
            raise ManifestParseError(
                f"Could not retrieve {Constants.MANIFEST_FILE} for {self.ref.owner}/{self.ref.repo}"
            )
        try:
            text = base64.b64decode(data["content"]).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ManifestParseError(f"{Constants.MANIFEST_FILE} could not be decoded: {exc}") from exc
        return Manifest.from_text(text)

    def canonical_url(self) -> str:
        full_name = (self._repo_data or {}).get("full_name")
        if isinstance(full_name, str) and full_name.count("/") == 1:
            return f"https://{self.ref.host}/{full_name}"
        return f"https://{self.ref.host}/{self.ref.owner}/{self.ref.repo}"

    def repository_identity(self) -> Optional[Tuple[str, str]]:
        repo_id = (self._repo_data or {}).get("id")
        if repo_id is None:
            return None
        return self.ref.host, str(repo_id)
